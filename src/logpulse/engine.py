"""Directory analysis: discover log files, schedule them, collect aggregates."""

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from time import time
from typing import Mapping

from logpulse import prometheus as prom
from logpulse.analyzers import SourceSummary
from logpulse.config import AnalysisConfig
from logpulse.errors import LogDirectoryError, NoLogFilesError
from logpulse.registry import AnalyzerRegistry
from logpulse.scheduler import Scheduler


logger = logging.getLogger(__name__)


LOG_SUFFIX = '.log'


@dataclass
class AnalysisResults:
    """Aggregates of one run, extracted after every file task returned.

    Analyzer sections are None when the analyzer was not active.
    """

    directory: str
    level_counts: Mapping[str, int] | None = None
    sources: SourceSummary | None = None
    anomalies: Mapping[str, tuple[datetime, ...]] | None = None

    # Run bookkeeping
    files: list[str] = field(default_factory=list)
    failed_files: dict[str, str] = field(default_factory=dict)  # path -> reason
    skipped_files: list[str] = field(default_factory=list)  # never started (deadline)
    abandoned_files: list[str] = field(default_factory=list)  # still running after the cancel grace period
    lines_parsed: int = 0
    lines_skipped: int = 0
    timed_out: bool = False
    elapsed: float = 0.0


def discover_log_files(directory: str) -> list[str]:
    """Return the ``.log`` files directly inside ``directory``, sorted.

    Raises:
        LogDirectoryError: If the directory does not exist or is not a directory.
        NoLogFilesError: If it holds no ``.log`` files.
    """
    if not os.path.exists(directory):
        raise LogDirectoryError(directory, 'does not exist')
    if not os.path.isdir(directory):
        raise LogDirectoryError(directory, 'not a directory')

    try:
        names = os.listdir(directory)
    except OSError as e:
        raise LogDirectoryError(directory, str(e)) from e

    files = sorted(
        os.path.join(directory, name)
        for name in names
        if name.endswith(LOG_SUFFIX) and os.path.isfile(os.path.join(directory, name))
    )
    if not files:
        raise NoLogFilesError(directory)
    return files


def collect_results(registry: AnalyzerRegistry, directory: str) -> AnalysisResults:
    """Freeze the registry's analyzers into an AnalysisResults.

    Must only be called once the scheduler has returned.
    """
    results = AnalysisResults(directory=directory)
    if registry.level_counter is not None:
        results.level_counts = registry.level_counter.result()
    if registry.source_counter is not None:
        results.sources = registry.source_counter.result()
    if registry.anomaly_detector is not None:
        results.anomalies = registry.anomaly_detector.result()
        prom.anomalies_detected_total.inc(sum(len(starts) for starts in results.anomalies.values()))
    return results


def run_analysis(config: AnalysisConfig) -> AnalysisResults:
    """
    Analyze every log file in the configured directory.

    Args:
        config: Validated run configuration.

    Returns:
        Frozen aggregates of all active analyzers plus run statistics.

    Raises:
        LogDirectoryError: If the log directory is unusable.
        NoLogFilesError: If there is nothing to analyze.
    """
    start_time = time()

    paths = discover_log_files(config.log_directory)
    logger.info(f'Found {len(paths)} log file(s) in {config.log_directory}')

    registry = AnalyzerRegistry.from_config(config)
    scheduler = Scheduler(max_workers=config.thread_pool_size, max_wait_seconds=config.max_wait_seconds)
    outcome = scheduler.run(paths, registry)

    results = collect_results(registry, config.log_directory)
    results.files = paths
    results.skipped_files = outcome.not_started
    results.abandoned_files = outcome.abandoned
    results.timed_out = outcome.timed_out
    for task_result in outcome.results:
        results.lines_parsed += task_result.records_parsed
        results.lines_skipped += task_result.lines_skipped
        if task_result.failed:
            results.failed_files[task_result.path] = task_result.error

    results.elapsed = time() - start_time
    prom.analysis_duration_seconds.observe(results.elapsed)
    logger.info(
        f'Analyzed {len(paths)} file(s) in {results.elapsed:.2f}s: '
        f'{results.lines_parsed} records, {results.lines_skipped} skipped lines, '
        f'{len(results.failed_files)} failed file(s)'
    )
    return results
