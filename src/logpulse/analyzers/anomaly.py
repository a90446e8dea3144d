"""Burst detection over a fixed-size sliding time window."""

import logging
from datetime import datetime
from types import MappingProxyType
from typing import Iterable, Mapping

from logpulse.parser import LogRecord

from .base import Analyzer


logger = logging.getLogger(__name__)


class AnomalyDetector(Analyzer):
    """Detects bursts of monitored-level records within a single file.

    Works in two phases:

    1. Accumulation (``on_record``, concurrent): records whose uppercased
       level is monitored are appended to a per-file list. Nothing else
       happens here, so writers never re-sort.
    2. Detection (``detect``, once all workers joined): each file's records
       are sorted by timestamp and a window of ``threshold`` consecutive
       records slides over them. Start index ``i`` is reported when
       ``ts[i + threshold - 1] - ts[i] <= window_seconds``.

    Every qualifying start is reported, so overlapping bursts each yield
    their own timestamp. Files without a burst are left out of the result.
    """

    def __init__(self, levels: Iterable[str], window_seconds: int, threshold: int):
        """Initialize the detector.

        Args:
            levels: Log levels to monitor (matched case-insensitively).
            window_seconds: Maximum span of a burst, inclusive.
            threshold: Number of records that make up a burst.
        """
        super().__init__()
        self.levels = frozenset(level.strip().upper() for level in levels)
        self.window_seconds = window_seconds
        self.threshold = threshold
        self._records_per_file: dict[str, list[LogRecord]] = {}

    @property
    def name(self) -> str:
        return 'DETECT_ANOMALIES'

    def on_record(self, filename: str, record: LogRecord) -> None:
        if record.level.upper() not in self.levels:
            return
        with self._lock:
            self._records_per_file.setdefault(filename, []).append(record)

    def monitored_counts(self) -> Mapping[str, int]:
        """Number of accumulated records per file."""
        with self._lock:
            return MappingProxyType({name: len(records) for name, records in self._records_per_file.items()})

    def detect(self) -> Mapping[str, tuple[datetime, ...]]:
        """Run the sliding-window pass over everything accumulated so far.

        Returns:
            Mapping of filename to the ordered start timestamps of every burst.
        """
        with self._lock:
            per_file = {name: list(records) for name, records in self._records_per_file.items()}

        result: dict[str, tuple[datetime, ...]] = {}
        for filename, records in per_file.items():
            starts = find_burst_starts(
                [r.timestamp for r in records], window_seconds=self.window_seconds, threshold=self.threshold
            )
            if starts:
                logger.debug(f'{len(starts)} burst(s) in {filename}')
                result[filename] = tuple(starts)

        return MappingProxyType(result)

    def result(self) -> Mapping[str, tuple[datetime, ...]]:
        return self.detect()


def find_burst_starts(timestamps: list[datetime], window_seconds: int, threshold: int) -> list[datetime]:
    """Return the start of every ``threshold``-sized window spanning at most ``window_seconds``.

    The input does not need to be sorted; it is sorted (stably) here.
    """
    ordered = sorted(timestamps)
    starts = []
    # Empty range when there are fewer than threshold entries
    for i in range(len(ordered) - threshold + 1):
        elapsed = (ordered[i + threshold - 1] - ordered[i]).total_seconds()
        if elapsed <= window_seconds:
            starts.append(ordered[i])
    return starts
