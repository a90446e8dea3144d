"""logpulse - concurrent batch analysis of structured log files."""

from logpulse.__version__ import __version__
