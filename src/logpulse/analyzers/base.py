"""Base class and result types for log analyzers."""

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping

from logpulse.parser import LogRecord


@dataclass(frozen=True)
class SourceEntry:
    """A source name together with how often it appeared."""

    name: str
    count: int


@dataclass(frozen=True)
class SourceSummary:
    """Frozen view of a SourceCounter after the run.

    ``most_common`` and ``least_common`` are None when no source was counted.
    """

    counts: Mapping[str, int]
    most_common: SourceEntry | None
    least_common: SourceEntry | None


class Analyzer(ABC):
    """Base class for all analyzers.

    The scheduler hands every parsed record to every registered analyzer
    through three hooks. Each analyzer overrides the hooks it cares about;
    the rest stay no-ops. Hooks are called concurrently from many worker
    threads, so implementations must guard their own state.
    """

    def __init__(self):
        self._lock = threading.Lock()

    @property
    @abstractmethod
    def name(self) -> str:
        """Analysis type identifier (e.g., 'COUNT_LEVELS')."""
        pass

    def on_level(self, level: str) -> None:
        """Called with the level field of each record."""

    def on_source(self, source: str) -> None:
        """Called with the source field of each record."""

    def on_record(self, filename: str, record: LogRecord) -> None:
        """Called with the whole record and the base name of its file."""

    @abstractmethod
    def result(self) -> Any:
        """Return a frozen aggregate. Only valid once all workers have joined."""
        pass
