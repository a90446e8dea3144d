"""Log source frequency counter with most/least common ranking."""

from collections import Counter
from types import MappingProxyType
from typing import Callable, Mapping

from .base import Analyzer, SourceEntry, SourceSummary


def _pick(counts: Mapping[str, int], choose: Callable) -> SourceEntry | None:
    if not counts:
        return None
    # max()/min() keep the first of equal items
    name = choose(counts, key=counts.__getitem__)
    return SourceEntry(name=name, count=counts[name])


class SourceCounter(Analyzer):
    """Counts how often each source appears.

    Sources are counted verbatim (no case folding).

    Ties between equally frequent sources go to whichever entry the counter's
    iteration order surfaces first. That is insertion order, and insertion
    order depends on how worker threads interleave, so the winner of a tie is
    undefined across runs.
    """

    def __init__(self):
        super().__init__()
        self._counts: Counter[str] = Counter()

    @property
    def name(self) -> str:
        return 'FIND_COMMON_SOURCE'

    def record(self, source: str) -> None:
        with self._lock:
            self._counts[source] += 1

    def on_source(self, source: str) -> None:
        self.record(source)

    def snapshot(self) -> Mapping[str, int]:
        """Return a read-only copy of the current counts."""
        with self._lock:
            return MappingProxyType(dict(self._counts))

    def most_common(self) -> SourceEntry | None:
        """Most frequent source, or None if nothing was counted."""
        return _pick(self.snapshot(), max)

    def least_common(self) -> SourceEntry | None:
        """Least frequent source, or None if nothing was counted."""
        return _pick(self.snapshot(), min)

    def result(self) -> SourceSummary:
        counts = self.snapshot()
        return SourceSummary(counts=counts, most_common=_pick(counts, max), least_common=_pick(counts, min))
