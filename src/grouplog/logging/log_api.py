"""
Module: log_api.py
Location: src/grouplog/logging/
Version: 0.1.0

Process-wide entry points for hosts that log through a single shared
registry/dispatcher pair.

The pair is created lazily on first use and can be replaced with
install() (tests, embedding, a dispatcher writing elsewhere).
"""

import sys
import threading
from typing import Optional, Sequence

from grouplog.logging.log_dispatcher import EmitOutcome, LogDispatcher, terminate_if_fatal
from grouplog.logging.log_level import LogLevel, level_from_name, name_of
from grouplog.logging.verbosity_registry import VerbosityRegistry

__all__ = [
    "Logger",
    "LogLevel",
    "default_dispatcher",
    "default_registry",
    "get_verbosity",
    "install",
    "level_from_name",
    "log",
    "name_of",
    "reset",
    "set_verbosity",
    "vlog",
]

_state_lock = threading.Lock()
_registry: Optional[VerbosityRegistry] = None
_dispatcher: Optional[LogDispatcher] = None


def install(
    registry: Optional[VerbosityRegistry] = None,
    dispatcher: Optional[LogDispatcher] = None,
) -> LogDispatcher:
    """
    Replace the process-wide pair.

    A registry passed alongside a dispatcher must be that dispatcher's
    own. With only a registry, a dispatcher writing to stderr is built
    around it.
    """
    global _registry, _dispatcher
    if dispatcher is not None and registry is not None and registry is not dispatcher.registry:
        raise ValueError("registry must be the dispatcher's own registry")
    with _state_lock:
        if dispatcher is None:
            dispatcher = LogDispatcher(registry or VerbosityRegistry())
        _registry = dispatcher.registry
        _dispatcher = dispatcher
        return dispatcher


def reset() -> None:
    """Drop the process-wide pair; the next call recreates it."""
    global _registry, _dispatcher
    with _state_lock:
        _registry = None
        _dispatcher = None


def default_dispatcher() -> LogDispatcher:
    global _registry, _dispatcher
    with _state_lock:
        if _dispatcher is None:
            if _registry is None:
                _registry = VerbosityRegistry()
            _dispatcher = LogDispatcher(_registry)
        return _dispatcher


def default_registry() -> VerbosityRegistry:
    return default_dispatcher().registry


def set_verbosity(group: str, level: LogLevel) -> None:
    default_registry().set(group, level)


def get_verbosity(group: str) -> LogLevel:
    return default_registry().get(group)


def log(level: LogLevel, location, callsite_id: str, fmt: str, *args) -> EmitOutcome:
    """Emit one record; a fatal record exits the process after it is written."""
    dispatcher = default_dispatcher()
    outcome = dispatcher.emit(level, location, callsite_id, fmt, *args)
    return terminate_if_fatal(outcome, dispatcher.stream)


def vlog(level: LogLevel, location, callsite_id: str, fmt: str, args: Sequence) -> EmitOutcome:
    return log(level, location, callsite_id, fmt, *args)


class Logger:
    """
    Convenience façade bound to a specific call site.

    The location of every record is the line number of the caller.
    """

    def __init__(self, callsite_id: str, dispatcher: Optional[LogDispatcher] = None):
        self._callsite_id = callsite_id
        self._dispatcher = dispatcher

    @property
    def callsite_id(self) -> str:
        return self._callsite_id

    def _log(self, level: LogLevel, fmt: str, args) -> EmitOutcome:
        # _log <- level method <- caller
        location = sys._getframe(2).f_lineno
        dispatcher = self._dispatcher or default_dispatcher()
        outcome = dispatcher.emit(level, str(location), self._callsite_id, fmt, *args)
        return terminate_if_fatal(outcome, dispatcher.stream)

    def fatal(self, fmt: str, *args) -> EmitOutcome:
        return self._log(LogLevel.fatal, fmt, args)

    def error(self, fmt: str, *args) -> EmitOutcome:
        return self._log(LogLevel.error, fmt, args)

    def warn(self, fmt: str, *args) -> EmitOutcome:
        return self._log(LogLevel.warn, fmt, args)

    def info(self, fmt: str, *args) -> EmitOutcome:
        return self._log(LogLevel.info, fmt, args)

    def verbose(self, fmt: str, *args) -> EmitOutcome:
        return self._log(LogLevel.verbose, fmt, args)

    def debug(self, fmt: str, *args) -> EmitOutcome:
        return self._log(LogLevel.debug, fmt, args)
