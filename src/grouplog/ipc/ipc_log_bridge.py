"""
Module: ipc_log_bridge.py
Location: src/grouplog/ipc/
Version: 0.1.0

Replays log records received from a remote process through the local
dispatcher. The remote call site is kept, so verbosity filtering uses
the remote site's group exactly as if the call had been made locally.
"""

from grouplog.ipc.log_message import LogMessage
from grouplog.logging.log_dispatcher import EmitOutcome, LogDispatcher, terminate_if_fatal


class IPCLogBridge:
    def __init__(self, dispatcher: LogDispatcher):
        self._dispatcher = dispatcher

    def receive(self, payload: bytes) -> EmitOutcome:
        """
        Decode one payload and emit it. Fire-and-forget: nothing is sent back.

        Raises ProtocolViolationError for a malformed payload. A fatal
        record exits the process after being written.
        """
        msg = LogMessage.from_bytes(payload)
        # "%s" keeps remote text from being read as a format string
        outcome = self._dispatcher.emit(
            msg.level, msg.location, msg.callsite_id, "%s", msg.message
        )
        return terminate_if_fatal(outcome, self._dispatcher.stream)

    def pump(self, receiver, max_items: int = 100) -> int:
        """Emit whatever the receiver has queued. Returns the number handled."""
        payloads = receiver.drain_incoming(max_items=max_items)
        for payload in payloads:
            self.receive(payload)
        return len(payloads)
