"""Run configuration: properties file, environment overrides and validation.

Configuration is read from a Java-style properties file::

    log.directory=logs
    thread.pool.size=5
    log.analysis=COUNT_LEVELS,FIND_COMMON_SOURCE,DETECT_ANOMALIES
    log.analysis.anomalies.levels=ERROR,WARNING
    log.analysis.anomalies.window=60
    log.analysis.anomalies.threshold=5
    output.file=output.json

Missing keys and unparseable numbers fall back to defaults. A handful of
LOGPULSE_* environment variables override the file, and explicit overrides
(from the command line) override both.
"""

import logging
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from logpulse.analyzers import ANALYSIS_TYPES, COUNT_LEVELS
from logpulse.errors import ConfigError
from logpulse.utils import get_float_env, get_int_env, get_str_env


logger = logging.getLogger(__name__)


DEFAULT_LOG_DIRECTORY = 'logs'
DEFAULT_THREAD_POOL_SIZE = 5
DEFAULT_ANOMALY_LEVELS = 'ERROR'
DEFAULT_ANOMALY_WINDOW = 60
DEFAULT_ANOMALY_THRESHOLD = 5
DEFAULT_OUTPUT_FILE = 'output.json'
DEFAULT_ANALYSIS = COUNT_LEVELS
DEFAULT_MAX_WAIT_SECONDS = 300.0

PROPERTY_PATTERN = re.compile(r'^(?P<key>[^=:\s]+)(?P<sep>\s*[=:]\s*|\s+)(?P<value>.*)$')


def read_properties(path: str) -> dict[str, str]:
    """Read ``key=value``, ``key: value`` or ``key value`` pairs from a properties file.

    Lines starting with ``#`` or ``!`` are comments. A file that cannot be
    read is reported and treated as empty.
    """
    props: dict[str, str] = {}
    try:
        with open(path, encoding='utf-8') as f:
            for line in f:
                stripped = line.strip()
                if not stripped or stripped[0] in '#!':
                    continue
                key, sep, value = _split_property(stripped)
                if not sep:
                    logger.warning(f'Ignoring property line without a value in {path}: {stripped}')
                    continue
                props[key] = value
    except OSError as e:
        logger.error(f'Error loading configuration from {path}: {e}')
    return props


def _split_property(line: str) -> tuple[str, str, str]:
    # Key ends at the first "=", ":" or whitespace; whitespace may surround the separator
    match = PROPERTY_PATTERN.match(line)
    if not match:
        return line, '', ''
    return match.group('key'), match.group('sep'), match.group('value')


def _split_list(value: str) -> list[str]:
    return [part.strip() for part in value.split(',') if part.strip()]


class PropertiesConfig:
    """Typed getters over a properties mapping, with defaults."""

    def __init__(self, props: dict[str, str]):
        self.props = props

    @classmethod
    def from_file(cls, path: str) -> 'PropertiesConfig':
        return cls(read_properties(path))

    def _get_int(self, key: str, default: int) -> int:
        raw = self.props.get(key)
        if raw is None:
            return default
        try:
            return int(raw)
        except ValueError:
            logger.warning(f'Invalid integer for {key}: {raw!r}, using default {default}')
            return default

    def get_log_directory(self) -> str:
        return self.props.get('log.directory', DEFAULT_LOG_DIRECTORY)

    def get_thread_pool_size(self) -> int:
        return self._get_int('thread.pool.size', DEFAULT_THREAD_POOL_SIZE)

    def get_output_file(self) -> str:
        return self.props.get('output.file', DEFAULT_OUTPUT_FILE)

    def get_analysis_types(self) -> list[str]:
        return _split_list(self.props.get('log.analysis', DEFAULT_ANALYSIS))

    def get_anomaly_levels(self) -> list[str]:
        return _split_list(self.props.get('log.analysis.anomalies.levels', DEFAULT_ANOMALY_LEVELS))

    def get_anomaly_window(self) -> int:
        return self._get_int('log.analysis.anomalies.window', DEFAULT_ANOMALY_WINDOW)

    def get_anomaly_threshold(self) -> int:
        return self._get_int('log.analysis.anomalies.threshold', DEFAULT_ANOMALY_THRESHOLD)

    def get_max_wait_seconds(self) -> float:
        raw = self.props.get('max.wait.seconds')
        if raw is None:
            return DEFAULT_MAX_WAIT_SECONDS
        try:
            return float(raw)
        except ValueError:
            logger.warning(f'Invalid number for max.wait.seconds: {raw!r}, using default {DEFAULT_MAX_WAIT_SECONDS}')
            return DEFAULT_MAX_WAIT_SECONDS


class AnalysisConfig(BaseModel):
    """Validated settings for one analysis run"""

    model_config = ConfigDict(frozen=True)

    log_directory: str = Field(DEFAULT_LOG_DIRECTORY, description='Directory scanned for .log files')
    thread_pool_size: int = Field(DEFAULT_THREAD_POOL_SIZE, ge=1, description='Number of worker threads')
    analysis_types: tuple[str, ...] = Field((DEFAULT_ANALYSIS,), description='Active analyzers')
    anomaly_levels: frozenset[str] = Field(
        frozenset({DEFAULT_ANOMALY_LEVELS}), description='Levels monitored by the anomaly detector'
    )
    anomaly_window: int = Field(DEFAULT_ANOMALY_WINDOW, ge=0, description='Burst window in seconds (inclusive)')
    anomaly_threshold: int = Field(DEFAULT_ANOMALY_THRESHOLD, ge=1, description='Records per burst')
    output_file: str = Field(DEFAULT_OUTPUT_FILE, description='Path of the JSON report')
    max_wait_seconds: float = Field(DEFAULT_MAX_WAIT_SECONDS, gt=0, description='Deadline for all file tasks')

    @field_validator('analysis_types', mode='before')
    @classmethod
    def normalize_analysis_types(cls, value: Any) -> tuple[str, ...]:
        if isinstance(value, str):
            value = _split_list(value)
        normalized: list[str] = []
        for item in value:
            name = item.strip().upper()
            if not name:
                continue
            if name not in ANALYSIS_TYPES:
                logger.warning(f'Ignoring unknown analysis type: {item}')
                continue
            if name not in normalized:
                normalized.append(name)
        return tuple(normalized)

    @field_validator('anomaly_levels', mode='before')
    @classmethod
    def normalize_levels(cls, value: Any) -> frozenset[str]:
        if isinstance(value, str):
            value = _split_list(value)
        return frozenset(level.strip().upper() for level in value if level.strip())


ENV_OVERRIDES = {
    'log_directory': ('LOGPULSE_LOG_DIRECTORY', get_str_env),
    'thread_pool_size': ('LOGPULSE_THREAD_POOL_SIZE', get_int_env),
    'output_file': ('LOGPULSE_OUTPUT_FILE', get_str_env),
    'max_wait_seconds': ('LOGPULSE_MAX_WAIT_SECONDS', get_float_env),
}


def load_config(path: str | None = None, **overrides: Any) -> AnalysisConfig:
    """Build the run configuration.

    Priority (highest first): ``overrides`` whose value is not None,
    LOGPULSE_* environment variables, the properties file, built-in defaults.

    Args:
        path: Properties file to read. None skips the file.
        **overrides: AnalysisConfig field values, typically from CLI options.

    Raises:
        ConfigError: If the combined values fail validation.
    """
    props = PropertiesConfig.from_file(path) if path else PropertiesConfig({})
    values: dict[str, Any] = {
        'log_directory': props.get_log_directory(),
        'thread_pool_size': props.get_thread_pool_size(),
        'analysis_types': props.get_analysis_types(),
        'anomaly_levels': props.get_anomaly_levels(),
        'anomaly_window': props.get_anomaly_window(),
        'anomaly_threshold': props.get_anomaly_threshold(),
        'output_file': props.get_output_file(),
        'max_wait_seconds': props.get_max_wait_seconds(),
    }

    for field_name, (env_key, getter) in ENV_OVERRIDES.items():
        env_value = getter(env_key)
        if env_value is not None:
            values[field_name] = env_value

    values.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return AnalysisConfig(**values)
    except ValidationError as e:
        raise ConfigError(f'Invalid configuration: {e}') from e
