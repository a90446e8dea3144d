"""Tests for report building and rendering."""

import json
from datetime import datetime
from types import MappingProxyType

import pytest

from logpulse.analyzers import SourceEntry, SourceSummary
from logpulse.engine import AnalysisResults
from logpulse.errors import ReportError
from logpulse.report import build_report, format_results_text, report_to_json, save_report


def make_results(**kwargs) -> AnalysisResults:
    kwargs.setdefault('directory', 'logs')
    kwargs.setdefault('files', ['logs/app.log'])
    return AnalysisResults(**kwargs)


FULL_SOURCES = SourceSummary(
    counts=MappingProxyType({'S1': 3, 'S2': 1}),
    most_common=SourceEntry('S1', 3),
    least_common=SourceEntry('S2', 1),
)


class TestBuildReport:
    """Tests for build_report and its JSON form."""

    def test_all_sections(self):
        results = make_results(
            level_counts=MappingProxyType({'info': 3, 'error': 1}),
            sources=FULL_SOURCES,
            anomalies=MappingProxyType({'app.log': (datetime(2024, 1, 1, 10, 0, 0), datetime(2024, 1, 1, 10, 0, 5))}),
            lines_parsed=4,
        )
        data = json.loads(report_to_json(build_report(results)))

        assert data['COUNT_LEVELS'] == {'info': 3, 'error': 1}
        assert data['FIND_COMMON_SOURCE'] == {
            'sources': ['S1', 'S2'],
            'source_counts': [3, 1],
            'most_common_source': 'S1',
            'most_common_source_count': 3,
            'least_common_source': 'S2',
            'least_common_source_count': 1,
        }
        assert data['DETECT_ANOMALIES'] == [
            {
                'app.log': {
                    'anomalies': ['2024-01-01 10:00:00', '2024-01-01 10:00:05'],
                    'anomalies_count': 2,
                }
            }
        ]
        assert data['RUN']['lines_parsed'] == 4
        assert data['RUN']['files_analyzed'] == 1

    def test_inactive_sections_omitted(self):
        data = json.loads(report_to_json(build_report(make_results(level_counts=MappingProxyType({'info': 1})))))
        assert 'FIND_COMMON_SOURCE' not in data
        assert data['DETECT_ANOMALIES'] == []

    def test_no_anomalies_is_empty_list(self):
        data = json.loads(report_to_json(build_report(make_results(anomalies=MappingProxyType({})))))
        assert data['DETECT_ANOMALIES'] == []

    def test_empty_sources(self):
        summary = SourceSummary(counts=MappingProxyType({}), most_common=None, least_common=None)
        report = build_report(make_results(sources=summary))
        assert report.find_common_source.most_common_source is None
        assert report.find_common_source.most_common_source_count == 0
        assert report.find_common_source.least_common_source is None

    def test_run_section_optional(self):
        data = json.loads(report_to_json(build_report(make_results(), include_run=False)))
        assert 'RUN' not in data


class TestSaveReport:
    """Tests for writing the report file."""

    def test_writes_json(self, tmp_path):
        path = tmp_path / 'output.json'
        save_report(build_report(make_results(level_counts=MappingProxyType({'info': 2}))), str(path))
        data = json.loads(path.read_text(encoding='utf-8'))
        assert data['COUNT_LEVELS'] == {'info': 2}

    def test_unwritable_path(self, tmp_path):
        with pytest.raises(ReportError):
            save_report(build_report(make_results()), str(tmp_path / 'missing_dir' / 'out.json'))


class TestFormatResultsText:
    """Tests for the console summary."""

    def test_summary_sections(self):
        results = make_results(
            level_counts=MappingProxyType({'info': 3}),
            sources=FULL_SOURCES,
            anomalies=MappingProxyType({'app.log': (datetime(2024, 1, 1, 10, 0, 0),)}),
            lines_parsed=3,
            lines_skipped=1,
        )
        text = format_results_text(results)
        assert 'Log level counts:' in text
        assert '  info: 3' in text
        assert 'Most common source: S1 (3)' in text
        assert 'Least common source: S2 (1)' in text
        assert 'File: app.log' in text
        assert '  -> 2024-01-01 10:00:00' in text
        assert '3 records, 1 skipped line(s)' in text

    def test_empty_sources_say_none(self):
        summary = SourceSummary(counts=MappingProxyType({}), most_common=None, least_common=None)
        text = format_results_text(make_results(sources=summary))
        assert 'Most common source: none' in text

    def test_failed_files_and_timeout(self):
        results = make_results(failed_files={'logs/bad.log': 'Permission denied'}, timed_out=True)
        text = format_results_text(results)
        assert 'logs/bad.log: Permission denied' in text
        assert 'partial results' in text

    def test_no_anomalies_message(self):
        text = format_results_text(make_results(anomalies=MappingProxyType({})))
        assert 'No anomalies detected.' in text

    def test_colorize_adds_escape_codes(self):
        text = format_results_text(make_results(level_counts=MappingProxyType({'info': 1})), colorize=True)
        assert '\x1b[' in text

    def test_abandoned_files_listed(self):
        results = make_results(abandoned_files=['logs/stuck.log'], timed_out=True)
        assert '  logs/stuck.log' in format_results_text(results)
        data = json.loads(report_to_json(build_report(results)))
        assert data['RUN']['abandoned_files'] == ['logs/stuck.log']
