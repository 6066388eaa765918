"""
Module: log_dispatcher.py
Location: src/grouplog/logging/
Version: 0.1.0

Formats a single log record and writes it to the diagnostic stream.

The dispatcher is the terminal sink for diagnostics: it never logs its
own failures. Fatal records are reported back to the caller as
EmitOutcome.TERMINATE; terminate_if_fatal() turns that into an exit.
"""

import os
import sys
import threading
import time
from enum import Enum
from typing import Callable, Optional, TextIO

from grouplog.logging.log_level import PREFIX_CHARS, LogLevel
from grouplog.logging.log_record import LogRecord, group_from_callsite
from grouplog.logging.log_style import (
    ANSI_COLOR_RESET,
    indent_lines,
    strip_ansi_escapes,
    style_for,
)
from grouplog.logging.verbosity_registry import VerbosityRegistry

# [timestamp] prefix: callsite:location: message
LOG_FMT = "[{elapsed:12.6f}] {prefix}: {callsite}:{location}: {message}"

FATAL_EXIT_STATUS = 1


class EmitOutcome(Enum):
    SUPPRESSED = "SUPPRESSED"  # Filtered out by verbosity, nothing written
    WRITTEN = "WRITTEN"        # Line written and flushed
    TERMINATE = "TERMINATE"    # Fatal record written; process must exit


def format_line(record: LogRecord, elapsed: float, terminal: bool) -> str:
    """
    Compose the output line for a record (without trailing newline).

    On a terminal the whole line is wrapped in the level's style and a
    reset sequence. Otherwise every escape sequence is removed from the
    composed line, including any carried in by the message.
    """
    line = LOG_FMT.format(
        elapsed=elapsed,
        prefix=PREFIX_CHARS[record.level],
        callsite=record.callsite_id,
        location=record.location,
        message=indent_lines(record.message),
    )
    if terminal:
        return f"{style_for(record.level)}{line}{ANSI_COLOR_RESET}"
    return strip_ansi_escapes(line)


def terminate_if_fatal(outcome: EmitOutcome, stream: Optional[TextIO] = None) -> EmitOutcome:
    """
    Exit with a non-zero status after flushing when outcome is TERMINATE.

    SystemExit only ends the raising thread, so off the main thread the
    process is ended directly once the streams are flushed.
    """
    if outcome is EmitOutcome.TERMINATE:
        for s in (stream, sys.stdout, sys.stderr):
            if s is not None:
                s.flush()
        if threading.current_thread() is not threading.main_thread():
            os._exit(FATAL_EXIT_STATUS)
        raise SystemExit(FATAL_EXIT_STATUS)
    return outcome


class LogDispatcher:
    """
    Filters, formats and writes log records.

    Verbosity is resolved per record through the shared registry using
    the group derived from the record's call site.
    """

    def __init__(
        self,
        registry: VerbosityRegistry,
        *,
        stream: Optional[TextIO] = None,
        clock: Callable[[], float] = time.monotonic,
        start_time: Optional[float] = None,
        is_terminal: Optional[bool] = None,
    ):
        self._registry = registry
        self._stream = stream
        self._clock = clock
        self._start_time = clock() if start_time is None else start_time
        self._is_terminal = is_terminal
        self._lock = threading.Lock()

    @property
    def registry(self) -> VerbosityRegistry:
        return self._registry

    @property
    def stream(self) -> TextIO:
        # Resolved late so a swapped sys.stderr (e.g. pytest capture) is honoured
        return self._stream if self._stream is not None else sys.stderr

    def is_enabled(self, level: LogLevel, callsite_id: str) -> bool:
        threshold = self._registry.get(group_from_callsite(callsite_id))
        return level <= threshold

    def emit(
        self,
        level: LogLevel,
        location: str,
        callsite_id: str,
        message_format: str,
        *args,
    ) -> EmitOutcome:
        # Filter before rendering so suppressed records cost no formatting
        if not self.is_enabled(level, callsite_id):
            return EmitOutcome.SUPPRESSED
        return self._write(level, location, callsite_id, message_format % args)

    def emit_message(
        self,
        level: LogLevel,
        location: str,
        callsite_id: str,
        message: str,
    ) -> EmitOutcome:
        """Emit a pre-rendered message; it is never treated as a format string."""
        if not self.is_enabled(level, callsite_id):
            return EmitOutcome.SUPPRESSED
        return self._write(level, location, callsite_id, message)

    def _write(self, level, location, callsite_id, message) -> EmitOutcome:
        level = LogLevel(level)
        record = LogRecord(
            level=level,
            location=str(location),
            callsite_id=callsite_id,
            message=message,
        )
        stream = self.stream
        terminal = self._is_terminal
        if terminal is None:
            isatty = getattr(stream, "isatty", None)
            terminal = bool(isatty and isatty())

        line = format_line(record, self._clock() - self._start_time, terminal)

        with self._lock:
            stream.write(line + "\n")
            stream.flush()

        if level == LogLevel.fatal:
            return EmitOutcome.TERMINATE
        return EmitOutcome.WRITTEN
