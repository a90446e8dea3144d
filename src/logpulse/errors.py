"""Exception hierarchy for logpulse.

Only directory-level and configuration errors are fatal to a run. Line and
file level failures are caught inside the scheduler and reported as
diagnostics.
"""


class LogPulseError(Exception):
    """Base class for all logpulse errors."""


class ConfigError(LogPulseError):
    """Configuration values failed validation."""


class LogDirectoryError(LogPulseError):
    """The configured log directory is missing or is not a directory."""

    def __init__(self, directory: str, reason: str):
        self.directory = directory
        self.reason = reason
        super().__init__(f'Invalid log directory {directory}: {reason}')


class NoLogFilesError(LogPulseError):
    """The log directory holds no .log files."""

    def __init__(self, directory: str):
        self.directory = directory
        super().__init__(f'No log files found in {directory}')


class ReportError(LogPulseError):
    """The report could not be written."""


class LineParseError(LogPulseError, ValueError):
    """A log line could not be turned into a LogRecord."""

    reason = 'invalid'

    def __init__(self, line: str, detail: str):
        self.line = line
        self.detail = detail
        super().__init__(detail)


class MalformedLineError(LineParseError):
    """The line does not follow the four-bracket grammar."""

    reason = 'malformed'


class TimestampFormatError(LineParseError):
    """The line matched, but its timestamp is not yyyy-MM-dd HH:mm:ss."""

    reason = 'timestamp'
