"""Log line parsing: frozen LogRecord + compiled four-bracket grammar.

Every line of a log file must look like::

    [2024-01-01 10:00:00] [ERROR] [Server1] [Disk read failed]

Each bracketed group is a run of characters without ``[`` or ``]``, groups are
separated by exactly one space and the pattern is anchored to the whole line.
"""

import re
from dataclasses import dataclass
from datetime import datetime

from logpulse.errors import MalformedLineError, TimestampFormatError


LINE_PATTERN = re.compile(r'^\[([^\[\]]*)\] \[([^\[\]]*)\] \[([^\[\]]*)\] \[([^\[\]]*)\]$')

# strptime alone accepts unpadded fields such as "2024-1-1 9:0:0"
TIMESTAMP_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}$')
TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'


def parse_timestamp(text: str) -> datetime:
    """Parse a ``yyyy-MM-dd HH:mm:ss`` timestamp.

    Raises:
        TimestampFormatError: If the text does not match the format exactly
            or names an impossible date.
    """
    if not TIMESTAMP_PATTERN.match(text):
        raise TimestampFormatError(text, f'Timestamp {text!r} does not match yyyy-MM-dd HH:mm:ss')
    try:
        return datetime.strptime(text, TIMESTAMP_FORMAT)
    except ValueError as e:
        raise TimestampFormatError(text, f'Invalid timestamp {text!r}: {e}') from e


def format_timestamp(value: datetime) -> str:
    """Render a timestamp back into the log file format."""
    return value.strftime(TIMESTAMP_FORMAT)


@dataclass(frozen=True)
class LogRecord:
    """One parsed log line. Never mutated after construction."""

    timestamp: datetime
    level: str
    source: str
    message: str

    @classmethod
    def from_fields(cls, timestamp: str, level: str, source: str, message: str) -> 'LogRecord':
        """Build a record from raw bracket contents, validating the timestamp."""
        return cls(timestamp=parse_timestamp(timestamp), level=level, source=source, message=message)

    def __str__(self) -> str:
        return f'[{format_timestamp(self.timestamp)}] [{self.level}] [{self.source}] [{self.message}]'


def parse_line(line: str) -> LogRecord:
    """Parse one raw log line into a LogRecord.

    Only the trailing line terminator is removed; bracket contents are kept
    verbatim, including surrounding whitespace.

    Args:
        line: Raw line as read from the file.

    Returns:
        The parsed record.

    Raises:
        MalformedLineError: The line does not match the four-bracket grammar.
        TimestampFormatError: The line matched but its timestamp is invalid.
    """
    stripped = line.rstrip('\r\n')
    match = LINE_PATTERN.match(stripped)
    if not match:
        raise MalformedLineError(stripped, 'Line does not match [timestamp] [level] [source] [message]')

    timestamp, level, source, message = match.groups()
    try:
        return LogRecord.from_fields(timestamp, level, source, message)
    except TimestampFormatError as e:
        # Report the whole line, not just the timestamp text
        raise TimestampFormatError(stripped, e.detail) from e
