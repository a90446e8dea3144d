"""Log analyzers.

This package contains the analyzers each parsed record is fanned out to.
"""

from .anomaly import AnomalyDetector, find_burst_starts
from .base import Analyzer, SourceEntry, SourceSummary
from .level_counter import LevelCounter
from .source_counter import SourceCounter


COUNT_LEVELS = 'COUNT_LEVELS'
FIND_COMMON_SOURCE = 'FIND_COMMON_SOURCE'
DETECT_ANOMALIES = 'DETECT_ANOMALIES'

ANALYSIS_TYPES = (COUNT_LEVELS, FIND_COMMON_SOURCE, DETECT_ANOMALIES)


__all__ = [
    # Base classes and results
    'Analyzer',
    'SourceEntry',
    'SourceSummary',
    # Analyzers
    'AnomalyDetector',
    'LevelCounter',
    'SourceCounter',
    # Algorithms
    'find_burst_starts',
    # Analysis type names
    'ANALYSIS_TYPES',
    'COUNT_LEVELS',
    'DETECT_ANOMALIES',
    'FIND_COMMON_SOURCE',
]
