"""Report building: JSON report file and console summary."""

import logging

import click

from logpulse.engine import AnalysisResults
from logpulse.errors import ReportError
from logpulse.models import AnalysisReport, FileAnomalies, RunSummary, SourceReport
from logpulse.parser import format_timestamp


logger = logging.getLogger(__name__)


def build_report(results: AnalysisResults, include_run: bool = True) -> AnalysisReport:
    """Convert run aggregates into the report model."""
    report = AnalysisReport()

    if results.level_counts is not None:
        report.count_levels = dict(results.level_counts)

    if results.sources is not None:
        summary = results.sources
        report.find_common_source = SourceReport(
            sources=list(summary.counts),
            source_counts=list(summary.counts.values()),
            most_common_source=summary.most_common.name if summary.most_common else None,
            most_common_source_count=summary.most_common.count if summary.most_common else 0,
            least_common_source=summary.least_common.name if summary.least_common else None,
            least_common_source_count=summary.least_common.count if summary.least_common else 0,
        )

    if results.anomalies:
        per_file = {
            filename: FileAnomalies(
                anomalies=[format_timestamp(ts) for ts in starts],
                anomalies_count=len(starts),
            )
            for filename, starts in sorted(results.anomalies.items())
        }
        report.detect_anomalies = [per_file]

    if include_run:
        report.run = RunSummary(
            directory=results.directory,
            files_analyzed=len(results.files),
            failed_files=dict(results.failed_files),
            skipped_files=list(results.skipped_files),
            abandoned_files=list(results.abandoned_files),
            lines_parsed=results.lines_parsed,
            lines_skipped=results.lines_skipped,
            timed_out=results.timed_out,
            time=results.elapsed,
        )

    return report


def report_to_json(report: AnalysisReport) -> str:
    return report.model_dump_json(by_alias=True, exclude_none=True, indent=4)


def save_report(report: AnalysisReport, path: str) -> None:
    """Write the report as indented JSON.

    Raises:
        ReportError: If the file cannot be written.
    """
    try:
        with open(path, 'w', encoding='utf-8') as f:
            f.write(report_to_json(report))
            f.write('\n')
    except OSError as e:
        logger.error(f'Error saving report to {path}: {e}')
        raise ReportError(f'Error saving report to {path}: {e}') from e
    logger.info(f'Report saved to {path}')


def format_results_text(results: AnalysisResults, colorize: bool = False) -> str:
    """Human-readable summary of the run, as printed by the CLI."""

    def heading(text: str) -> str:
        return click.style(text, fg='cyan', bold=True) if colorize else text

    def highlight(text: str) -> str:
        return click.style(text, fg='yellow') if colorize else text

    lines: list[str] = []

    if results.level_counts is not None:
        lines.append(heading('Log level counts:'))
        for level, count in sorted(results.level_counts.items()):
            lines.append(f'  {level}: {count}')
        lines.append('')

    if results.sources is not None:
        summary = results.sources
        lines.append(heading('Sources:'))
        for source, count in summary.counts.items():
            lines.append(f'  {source}: {count}')
        most = f'{summary.most_common.name} ({summary.most_common.count})' if summary.most_common else 'none'
        least = f'{summary.least_common.name} ({summary.least_common.count})' if summary.least_common else 'none'
        lines.append(f'Most common source: {highlight(most)}')
        lines.append(f'Least common source: {highlight(least)}')
        lines.append('')

    if results.anomalies is not None:
        if results.anomalies:
            lines.append(heading('Anomalies detected:'))
            for filename, starts in sorted(results.anomalies.items()):
                lines.append(f'File: {filename}')
                for ts in starts:
                    lines.append(f'  -> {highlight(format_timestamp(ts))}')
        else:
            lines.append(heading('No anomalies detected.'))
        lines.append('')

    if results.failed_files:
        lines.append(heading('Failed files:'))
        for path, reason in sorted(results.failed_files.items()):
            lines.append(f'  {path}: {reason}')
        lines.append('')

    if results.abandoned_files:
        lines.append(heading('Abandoned files (did not stop after the deadline):'))
        for path in results.abandoned_files:
            lines.append(f'  {path}')
        lines.append('')

    status = ' (deadline reached, partial results)' if results.timed_out else ''
    lines.append(
        f'{len(results.files)} file(s), {results.lines_parsed} records, '
        f'{results.lines_skipped} skipped line(s) in {results.elapsed:.2f}s{status}'
    )
    return '\n'.join(lines)
