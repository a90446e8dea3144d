"""Prometheus metrics for logpulse"""

from prometheus_client import REGISTRY, Counter, Histogram, write_to_textfile

from logpulse.errors import ReportError

# ============================================================================
# File Processing Metrics
# ============================================================================

# Files read to the end (or until cancelled)
files_processed_total = Counter('logpulse_files_processed_total', 'Total number of log files processed')

# Files that could not be opened or read
files_failed_total = Counter('logpulse_files_failed_total', 'Total number of log files that failed with an I/O error')


# ============================================================================
# Line Metrics
# ============================================================================

lines_parsed_total = Counter('logpulse_lines_parsed_total', 'Total number of lines parsed into records')

lines_skipped_total = Counter(
    'logpulse_lines_skipped_total',
    'Total number of lines skipped as unparseable',
    ['reason'],  # malformed, timestamp
)


# ============================================================================
# Run Metrics
# ============================================================================

anomalies_detected_total = Counter('logpulse_anomalies_detected_total', 'Total number of burst starts detected')

schedule_timeouts_total = Counter(
    'logpulse_schedule_timeouts_total', 'Total number of runs that hit the scheduling deadline'
)

analysis_duration_seconds = Histogram(
    'logpulse_analysis_duration_seconds',
    'Time spent analyzing a log directory',
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0],
    # 10ms to 5 minutes - matches the default scheduling deadline
)


def write_metrics(path: str) -> None:
    """Write every registered metric to ``path`` in the Prometheus text format.

    Meant for node_exporter's textfile collector: the file is written to a
    temporary name and renamed, so a scraper never sees a partial file.

    Raises:
        ReportError: If the file cannot be written.
    """
    try:
        write_to_textfile(path, REGISTRY)
    except OSError as e:
        raise ReportError(f'Error writing metrics to {path}: {e}') from e
