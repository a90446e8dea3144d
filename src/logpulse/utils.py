"""Utility functions for logpulse"""

import logging
import os


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_int_env(key: str, default: int | None = None) -> int | None:
    """Get integer value from environment variable, return default if not set or invalid."""
    val = os.getenv(key)
    if val is None:
        return default
    try:
        return int(val)
    except ValueError:
        return default


def get_float_env(key: str, default: float | None = None) -> float | None:
    """Get float value from environment variable, return default if not set or invalid."""
    val = os.getenv(key)
    if val is None:
        return default
    try:
        return float(val)
    except ValueError:
        return default


def get_str_env(key: str, default: str | None = None) -> str | None:
    """
    Get string from environment variable, return default if not set.

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        String value or default
    """
    return os.getenv(key, default)


def setup_logging(verbose: bool = False) -> None:
    """
    Configure the root logger for command line use.

    Level comes from LOGPULSE_LOG_LEVEL (default WARNING, so that skipped
    lines and unreadable files are reported). ``verbose`` forces DEBUG.
    """
    if verbose:
        level = logging.DEBUG
    else:
        level_name = get_str_env('LOGPULSE_LOG_LEVEL', 'WARNING').upper()
        level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT)
