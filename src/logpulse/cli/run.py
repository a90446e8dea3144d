"""CLI command for analyzing a log directory."""

import os
import sys

import click

from logpulse.config import load_config
from logpulse.engine import run_analysis
from logpulse.errors import LogPulseError
from logpulse.prometheus import write_metrics
from logpulse.report import build_report, format_results_text, report_to_json, save_report
from logpulse.utils import setup_logging


DEFAULT_CONFIG_FILE = 'config.properties'


@click.command('run')
@click.option(
    '--config',
    '-c',
    'config_path',
    type=click.Path(dir_okay=False),
    default=None,
    help=f'Properties file to read (default: ./{DEFAULT_CONFIG_FILE} if present)',
)
@click.option('--log-dir', '-d', type=click.Path(), default=None, help='Directory with .log files')
@click.option('--workers', '-w', type=int, default=None, help='Number of worker threads')
@click.option(
    '--analysis',
    '-a',
    default=None,
    help='Comma-separated analyzers: COUNT_LEVELS, FIND_COMMON_SOURCE, DETECT_ANOMALIES',
)
@click.option('--anomaly-levels', default=None, help='Comma-separated levels monitored for bursts')
@click.option('--anomaly-window', type=int, default=None, help='Burst window in seconds')
@click.option('--anomaly-threshold', type=int, default=None, help='Number of entries that make a burst')
@click.option('--output', '-o', type=click.Path(dir_okay=False), default=None, help='JSON report path')
@click.option('--max-wait', type=float, default=None, help='Seconds to wait for all files before giving up')
@click.option('--json', 'json_output', is_flag=True, help='Print the JSON report instead of the text summary')
@click.option('--no-report', is_flag=True, help='Do not write the report file')
@click.option(
    '--metrics-file',
    type=click.Path(dir_okay=False),
    default=None,
    help='Write Prometheus metrics of the run to this file (textfile collector format)',
)
@click.option('--no-color', is_flag=True, help='Disable colored output')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def run_command(
    config_path: str | None,
    log_dir: str | None,
    workers: int | None,
    analysis: str | None,
    anomaly_levels: str | None,
    anomaly_window: int | None,
    anomaly_threshold: int | None,
    output: str | None,
    max_wait: float | None,
    json_output: bool,
    no_report: bool,
    metrics_file: str | None,
    no_color: bool,
    verbose: bool,
):
    """Analyze every .log file in the log directory.

    Each line must look like:

    \b
        [2024-01-01 10:00:00] [ERROR] [Server1] [Disk read failed]

    Lines that do not match are skipped with a warning.

    \b
    Examples:
        logpulse run --config config.properties
        logpulse run -d logs -a COUNT_LEVELS,FIND_COMMON_SOURCE
        logpulse run -d logs -a DETECT_ANOMALIES --anomaly-levels ERROR,WARN --anomaly-window 30
        logpulse run -d logs --json --no-report
        logpulse run -d logs --metrics-file /var/lib/node_exporter/logpulse.prom
    """
    setup_logging(verbose)

    if config_path is None and os.path.isfile(DEFAULT_CONFIG_FILE):
        config_path = DEFAULT_CONFIG_FILE

    try:
        config = load_config(
            config_path,
            log_directory=log_dir,
            thread_pool_size=workers,
            analysis_types=analysis,
            anomaly_levels=anomaly_levels,
            anomaly_window=anomaly_window,
            anomaly_threshold=anomaly_threshold,
            output_file=output,
            max_wait_seconds=max_wait,
        )
        results = run_analysis(config)
        report = build_report(results)

        if json_output:
            click.echo(report_to_json(report))
        else:
            colorize = not no_color and sys.stdout.isatty()
            click.echo(format_results_text(results, colorize=colorize))

        if not no_report:
            save_report(report, config.output_file)
            if not json_output:
                click.echo(f'Report saved to {config.output_file}')

        if metrics_file:
            write_metrics(metrics_file)
    except LogPulseError as e:
        click.echo(f'Error: {e}', err=True)
        sys.exit(1)
