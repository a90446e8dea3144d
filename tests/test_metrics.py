"""Tests for the Prometheus metrics recorded by a run and their export."""

import pytest
from click.testing import CliRunner
from prometheus_client import REGISTRY

from logpulse.cli.run import run_command
from logpulse.config import AnalysisConfig
from logpulse.engine import run_analysis
from logpulse.errors import ReportError
from logpulse.prometheus import write_metrics


LINES = [
    '[2024-01-01 10:00:00] [ERROR] [Db] [down]',
    '[2024-01-01 10:00:10] [ERROR] [Db] [still down]',
    'garbage',
    '[2024-01-01T10:00:20] [INFO] [Web] [bad timestamp]',
]


def sample(name: str, labels: dict[str, str] | None = None) -> float:
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


class TestRunMetrics:
    """Counters move by what a run actually did."""

    def test_line_and_file_counters(self, write_logs):
        log_dir = write_logs({'a.log': LINES, 'b.log': LINES[:1]})
        before = {
            'parsed': sample('logpulse_lines_parsed_total'),
            'malformed': sample('logpulse_lines_skipped_total', {'reason': 'malformed'}),
            'timestamp': sample('logpulse_lines_skipped_total', {'reason': 'timestamp'}),
            'files': sample('logpulse_files_processed_total'),
            'runs': sample('logpulse_analysis_duration_seconds_count'),
        }

        run_analysis(AnalysisConfig(log_directory=log_dir, thread_pool_size=2))

        assert sample('logpulse_lines_parsed_total') - before['parsed'] == 3
        assert sample('logpulse_lines_skipped_total', {'reason': 'malformed'}) - before['malformed'] == 1
        assert sample('logpulse_lines_skipped_total', {'reason': 'timestamp'}) - before['timestamp'] == 1
        assert sample('logpulse_files_processed_total') - before['files'] == 2
        assert sample('logpulse_analysis_duration_seconds_count') - before['runs'] == 1

    def test_anomalies_counted(self, write_logs):
        log_dir = write_logs({'a.log': LINES})
        before = sample('logpulse_anomalies_detected_total')

        run_analysis(
            AnalysisConfig(
                log_directory=log_dir, analysis_types='DETECT_ANOMALIES', anomaly_threshold=2, anomaly_window=60
            )
        )

        assert sample('logpulse_anomalies_detected_total') - before == 1

    def test_failed_file_counted(self, write_logs, monkeypatch):
        log_dir = write_logs({'a.log': LINES[:1]})
        monkeypatch.setattr('logpulse.engine.discover_log_files', lambda directory: [f'{directory}/gone.log'])
        before = sample('logpulse_files_failed_total')

        run_analysis(AnalysisConfig(log_directory=log_dir))

        assert sample('logpulse_files_failed_total') - before == 1


class TestWriteMetrics:
    """Tests for the textfile export."""

    def test_writes_exposition_format(self, tmp_path):
        path = tmp_path / 'logpulse.prom'
        write_metrics(str(path))
        text = path.read_text(encoding='utf-8')
        assert '# TYPE logpulse_lines_parsed counter' in text
        assert 'logpulse_lines_parsed_total ' in text
        assert 'logpulse_analysis_duration_seconds_bucket' in text

    def test_unwritable_path(self, tmp_path):
        with pytest.raises(ReportError):
            write_metrics(str(tmp_path / 'missing_dir' / 'logpulse.prom'))

    def test_cli_metrics_file(self, write_logs, tmp_path):
        log_dir = write_logs({'app.log': LINES[:1]})
        path = tmp_path / 'logpulse.prom'
        result = CliRunner().invoke(
            run_command, ['--log-dir', log_dir, '--no-report', '--metrics-file', str(path)]
        )
        assert result.exit_code == 0, result.output
        text = path.read_text(encoding='utf-8')
        assert 'logpulse_lines_parsed_total' in text
        assert 'logpulse_files_processed_total' in text

    def test_cli_unwritable_metrics_file(self, write_logs, tmp_path):
        log_dir = write_logs({'app.log': LINES[:1]})
        result = CliRunner().invoke(
            run_command,
            ['--log-dir', log_dir, '--no-report', '--metrics-file', str(tmp_path / 'nope' / 'm.prom')],
        )
        assert result.exit_code == 1
        assert 'Error writing metrics' in result.output
