"""Log level frequency counter."""

from collections import Counter
from types import MappingProxyType
from typing import Mapping

from .base import Analyzer


class LevelCounter(Analyzer):
    """Counts how often each log level occurs, case-insensitively.

    Levels are normalized to lowercase, so ``ERROR`` and ``error`` share a
    counter.
    """

    def __init__(self):
        super().__init__()
        self._counts: Counter[str] = Counter()

    @property
    def name(self) -> str:
        return 'COUNT_LEVELS'

    def record(self, level: str) -> None:
        key = level.lower()
        with self._lock:
            self._counts[key] += 1

    def on_level(self, level: str) -> None:
        self.record(level)

    def snapshot(self) -> Mapping[str, int]:
        """Return a read-only copy of the current counts."""
        with self._lock:
            return MappingProxyType(dict(self._counts))

    def result(self) -> Mapping[str, int]:
        return self.snapshot()
