from enum import IntEnum
from typing import Optional


class LogLevel(IntEnum):
    """
    Severity of a log record.

    Ordered from most to least severe. A record passes the filter
    when its level is numerically <= the effective threshold.
    """

    fatal = 0      # Report and terminate the process
    error = 1      # Operation failed
    warn = 2       # Unexpected but recoverable
    info = 3       # Normal operation (default threshold)
    verbose = 4    # Extra detail
    debug = 5      # Developer diagnostics


DEFAULT_LEVEL = LogLevel.info

PREFIX_CHARS = {
    LogLevel.fatal: "F",
    LogLevel.error: "E",
    LogLevel.warn: "W",
    LogLevel.info: "I",
    LogLevel.verbose: "V",
    LogLevel.debug: "D",
}

_LEVELS_BY_NAME = {level.name: level for level in LogLevel}


def level_from_name(name: str) -> Optional[LogLevel]:
    """Exact, case-sensitive lookup. Returns None for an unknown name."""
    return _LEVELS_BY_NAME.get(name)


def name_of(level: LogLevel) -> str:
    return LogLevel(level).name
