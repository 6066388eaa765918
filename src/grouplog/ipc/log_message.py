"""
Module: log_message.py
Location: src/grouplog/ipc/
Version: 0.1.0

Wire format for log records forwarded between processes.

A payload is a UTF-8 JSON array of exactly four fields, in order:
    [level:int, location:str, callsite_id:str, message:str]

The channel is a trusted internal link; any deviation is a protocol
violation, not a recoverable input error.
"""

import json
from dataclasses import astuple, dataclass

from grouplog.logging.log_exceptions import ProtocolViolationError
from grouplog.logging.log_level import LogLevel
from grouplog.logging.log_record import LogRecord

FIELD_COUNT = 4


@dataclass(frozen=True)
class LogMessage:
    level: int          # LogLevel value
    location: str       # Line within the remote call site
    callsite_id: str    # Remote source identifier
    message: str        # Rendered message, never re-formatted

    @staticmethod
    def from_record(record: LogRecord) -> "LogMessage":
        return LogMessage(
            level=int(record.level),
            location=record.location,
            callsite_id=record.callsite_id,
            message=record.message,
        )

    def to_json(self) -> str:
        return json.dumps(list(astuple(self)))

    def to_bytes(self) -> bytes:
        return self.to_json().encode("utf-8")

    @staticmethod
    def from_bytes(payload: bytes) -> "LogMessage":
        try:
            fields = json.loads(bytes(payload).decode("utf-8"))
        except (UnicodeDecodeError, ValueError, RecursionError) as e:
            raise ProtocolViolationError(f"Undecodable log payload: {e}", payload)

        if not isinstance(fields, list) or len(fields) != FIELD_COUNT:
            count = len(fields) if isinstance(fields, list) else "non-list"
            raise ProtocolViolationError(
                f"Log payload must hold {FIELD_COUNT} fields, got {count}", payload
            )

        level, location, callsite_id, message = fields
        if isinstance(level, bool) or not isinstance(level, int):
            raise ProtocolViolationError("Log level field must be an integer", payload)
        try:
            LogLevel(level)
        except ValueError:
            raise ProtocolViolationError(f"Unknown log level {level}", payload)
        for value in (location, callsite_id, message):
            if not isinstance(value, str):
                raise ProtocolViolationError("Log text fields must be strings", payload)

        return LogMessage(level, location, callsite_id, message)
