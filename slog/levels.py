"""
Log levels and the rank table used for filtering.
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Union


class LogLevel(str, Enum):
    """Severity of a log record"""
    TRACE = 'TRACE'
    DEBUG = 'DEBUG'
    INFO = 'INFO'
    WARNING = 'WARNING'
    ERROR = 'ERROR'


LEVEL_RANKS: Mapping[LogLevel, int] = MappingProxyType({
    LogLevel.TRACE: 1,
    LogLevel.DEBUG: 2,
    LogLevel.INFO: 3,
    LogLevel.WARNING: 4,
    LogLevel.ERROR: 5,
})

LEVEL_NAMES = tuple(level.value for level in LogLevel)


def parse_level(value: Union[str, LogLevel, None]) -> Optional[LogLevel]:
    """
    Resolve a level name to a LogLevel.

    Args:
        value: Level name or LogLevel

    Returns:
        The matching LogLevel, or None if the value is not a recognized level
    """
    if isinstance(value, LogLevel):
        return value
    if isinstance(value, str) and value in LEVEL_NAMES:
        return LogLevel(value)
    return None


def is_enabled(level: LogLevel, minimum: Optional[LogLevel]) -> bool:
    """True if a record at `level` passes the configured `minimum`"""
    if minimum is None:
        return True
    return LEVEL_RANKS[level] >= LEVEL_RANKS[minimum]
