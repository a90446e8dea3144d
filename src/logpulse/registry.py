"""Registry of the analyzers active for a run."""

import logging
from typing import Iterator

from logpulse.analyzers import (
    COUNT_LEVELS,
    DETECT_ANOMALIES,
    FIND_COMMON_SOURCE,
    Analyzer,
    AnomalyDetector,
    LevelCounter,
    SourceCounter,
)
from logpulse.config import AnalysisConfig


logger = logging.getLogger(__name__)


class AnalyzerRegistry:
    """Holds the analyzer instances every file's records are fanned out to.

    Built once per run, before scheduling. The typed accessors return None
    for analyzers that are not active, so result extraction never needs to
    inspect analyzer types.
    """

    def __init__(
        self,
        level_counter: LevelCounter | None = None,
        source_counter: SourceCounter | None = None,
        anomaly_detector: AnomalyDetector | None = None,
    ):
        self.level_counter = level_counter
        self.source_counter = source_counter
        self.anomaly_detector = anomaly_detector
        self._analyzers: tuple[Analyzer, ...] = tuple(
            a for a in (level_counter, source_counter, anomaly_detector) if a is not None
        )

    @classmethod
    def from_config(cls, config: AnalysisConfig) -> 'AnalyzerRegistry':
        """Create the analyzers named by ``config.analysis_types``."""
        types = set(config.analysis_types)
        registry = cls(
            level_counter=LevelCounter() if COUNT_LEVELS in types else None,
            source_counter=SourceCounter() if FIND_COMMON_SOURCE in types else None,
            anomaly_detector=AnomalyDetector(
                levels=config.anomaly_levels,
                window_seconds=config.anomaly_window,
                threshold=config.anomaly_threshold,
            )
            if DETECT_ANOMALIES in types
            else None,
        )
        logger.debug(f'[REGISTRY] Created {len(registry)} analyzers: {registry.names()}')
        return registry

    def names(self) -> list[str]:
        return [a.name for a in self._analyzers]

    def __iter__(self) -> Iterator[Analyzer]:
        return iter(self._analyzers)

    def __len__(self) -> int:
        return len(self._analyzers)
