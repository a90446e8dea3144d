"""Pytest configuration and shared fixtures for logpulse tests.

This module provides an auto-use fixture that keeps LOGPULSE_* environment
variables from leaking into tests, plus helpers to build log directories.
"""

import os

import pytest


ENV_VARS = [
    'LOGPULSE_LOG_DIRECTORY',
    'LOGPULSE_THREAD_POOL_SIZE',
    'LOGPULSE_OUTPUT_FILE',
    'LOGPULSE_MAX_WAIT_SECONDS',
    'LOGPULSE_LOG_LEVEL',
]


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """Auto-use fixture that clears logpulse environment overrides.

    This ensures a developer's shell configuration cannot change test
    outcomes.
    """
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture
def write_logs(tmp_path):
    """Fixture that writes log files into a fresh directory.

    Usage:
        log_dir = write_logs({'app.log': ['[2024-01-01 10:00:00] [INFO] [S1] [ok]']})

    Returns:
        Callable taking a mapping of file name -> list of lines and returning
        the directory path as a string.
    """
    log_dir = tmp_path / 'logs'
    log_dir.mkdir()

    def _write(files: dict[str, list[str]]) -> str:
        for name, lines in files.items():
            with open(os.path.join(log_dir, name), 'w', encoding='utf-8') as f:
                for line in lines:
                    f.write(line + '\n')
        return str(log_dir)

    return _write
