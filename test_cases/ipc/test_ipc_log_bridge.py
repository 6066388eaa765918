import io

import pytest

from grouplog.ipc.ipc_log_bridge import IPCLogBridge
from grouplog.ipc.log_message import LogMessage
from grouplog.logging.log_dispatcher import EmitOutcome, LogDispatcher
from grouplog.logging.log_exceptions import ProtocolViolationError
from grouplog.logging.log_level import LogLevel
from grouplog.logging.verbosity_registry import VerbosityRegistry


def make_dispatcher(registry=None):
    out = io.StringIO()
    dispatcher = LogDispatcher(registry or VerbosityRegistry(), stream=out, clock=lambda: 3.0, start_time=1.0)
    return dispatcher, out


class QueuedReceiver:
    def __init__(self, payloads):
        self._payloads = list(payloads)

    def drain_incoming(self, max_items: int = 100):
        items, self._payloads = self._payloads[:max_items], self._payloads[max_items:]
        return items


def test_receive_matches_direct_log() -> None:
    direct, direct_out = make_dispatcher()
    direct.emit(LogLevel.error, "42", "mod.c", "%s", "boom")

    bridged, bridged_out = make_dispatcher()
    payload = LogMessage(int(LogLevel.error), "42", "mod.c", "boom").to_bytes()
    assert IPCLogBridge(bridged).receive(payload) is EmitOutcome.WRITTEN

    assert bridged_out.getvalue() == direct_out.getvalue()
    assert bridged_out.getvalue() == "[    2.000000] E: mod.c:42: boom\n"


def test_remote_callsite_group_used_for_filtering() -> None:
    registry = VerbosityRegistry()
    registry.set("script/lib", LogLevel.debug)
    dispatcher, out = make_dispatcher(registry)
    bridge = IPCLogBridge(dispatcher)

    shown = LogMessage(int(LogLevel.debug), "8", "./lib/tab.lua", "shown").to_bytes()
    hidden = LogMessage(int(LogLevel.debug), "8", "mod.c", "hidden").to_bytes()
    assert bridge.receive(shown) is EmitOutcome.WRITTEN
    assert bridge.receive(hidden) is EmitOutcome.SUPPRESSED
    assert out.getvalue() == "[    2.000000] D: ./lib/tab.lua:8: shown\n"


def test_remote_message_not_treated_as_format() -> None:
    dispatcher, out = make_dispatcher()
    payload = LogMessage(int(LogLevel.warn), "1", "mod.c", "%s %d %(x)s %%").to_bytes()
    IPCLogBridge(dispatcher).receive(payload)
    assert out.getvalue().endswith(": %s %d %(x)s %%\n")


def test_remote_escapes_stripped_off_terminal() -> None:
    dispatcher, out = make_dispatcher()
    payload = LogMessage(int(LogLevel.error), "1", "mod.c", "\x1b[2Jwiped").to_bytes()
    IPCLogBridge(dispatcher).receive(payload)
    assert "\x1b" not in out.getvalue()


def test_bad_payload_is_fatal_protocol_error() -> None:
    dispatcher, out = make_dispatcher()
    with pytest.raises(ProtocolViolationError):
        IPCLogBridge(dispatcher).receive(b'[1, "42", "mod.c"]')
    assert out.getvalue() == ""


def test_remote_fatal_exits() -> None:
    dispatcher, out = make_dispatcher()
    payload = LogMessage(int(LogLevel.fatal), "1", "mod.c", "remote crash").to_bytes()
    with pytest.raises(SystemExit) as excinfo:
        IPCLogBridge(dispatcher).receive(payload)
    assert excinfo.value.code == 1
    assert out.getvalue().endswith("F: mod.c:1: remote crash\n")


def test_pump_drains_receiver() -> None:
    dispatcher, out = make_dispatcher()
    receiver = QueuedReceiver(
        LogMessage(int(LogLevel.info), str(i), "mod.c", f"m{i}").to_bytes() for i in range(5)
    )
    bridge = IPCLogBridge(dispatcher)
    assert bridge.pump(receiver, max_items=3) == 3
    assert bridge.pump(receiver) == 2
    assert bridge.pump(receiver) == 0
    assert [line.rsplit(" ", 1)[-1] for line in out.getvalue().splitlines()] == ["m0", "m1", "m2", "m3", "m4"]
