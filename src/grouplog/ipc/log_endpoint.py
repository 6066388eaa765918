# log_endpoint.py
from __future__ import annotations

import queue
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional

import zmq

from grouplog.ipc.log_message import LogMessage
from grouplog.logging.log_dispatcher import EmitOutcome
from grouplog.logging.log_level import LogLevel


@dataclass(frozen=True)
class LogEndpointConfig:
    """
    Configuration for the controlling process' log receiver.

    address may use a wildcard port ("tcp://127.0.0.1:*"); the
    resolved address is available from LogReceiver.wait_ready().
    """

    address: str
    poll_timeout_ms: int = 50
    linger_ms: int = 0


class LogReceiver:
    """
    LogReceiver: transport + queue boundary on the controlling side.

    Thread ownership model:
      - start() spins a thread
      - thread creates the PULL socket, binds and runs the poll loop
      - the main flow never touches zmq sockets; it drains raw
        payloads with recv()/drain_incoming() and hands them to
        IPCLogBridge on its own thread
    """

    def __init__(
        self,
        config: LogEndpointConfig,
        *,
        logger: Optional[Callable[[str], None]] = None,
    ):
        self.cfg = config
        self._log = logger or (lambda s: None)

        self._in_q: "queue.Queue[bytes]" = queue.Queue()

        self._stop_evt = threading.Event()
        self._ready_evt = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._bound_address: Optional[str] = None
        self._error: Optional[BaseException] = None

        # These exist only in receiver thread
        self._ctx = None
        self._sock = None
        self._poller = None

    # --------------------------
    # Public API (main flow side)
    # --------------------------

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._stop_evt.clear()
        self._ready_evt.clear()
        self._error = None
        self._thread = threading.Thread(target=self._run, name=f"LogReceiver[{self.cfg.address}]", daemon=True)
        self._thread.start()
        self._log(f"[LogReceiver] Started for {self.cfg.address}")

    def stop(self, join_timeout: float = 2.0) -> None:
        self._stop_evt.set()
        if self._thread:
            self._thread.join(timeout=join_timeout)
        self._log(f"[LogReceiver] Stopped for {self.cfg.address}")

    def wait_ready(self, timeout: Optional[float] = None) -> str:
        """Block until the socket is bound and return the resolved address."""
        if not self._ready_evt.wait(timeout):
            raise TimeoutError(f"Log receiver for {self.cfg.address} not ready")
        if self._error is not None:
            raise self._error
        return self._bound_address

    def recv(self, timeout: Optional[float] = None) -> Optional[bytes]:
        try:
            return self._in_q.get(timeout=timeout)
        except queue.Empty:
            return None

    def drain_incoming(self, max_items: int = 100) -> list[bytes]:
        items = []
        for _ in range(max_items):
            try:
                items.append(self._in_q.get_nowait())
            except queue.Empty:
                break
        return items

    # --------------------------
    # Receiver thread internals
    # --------------------------

    def _run(self) -> None:
        try:
            self._setup_zmq()
        except zmq.ZMQError as e:
            self._error = e
            self._ready_evt.set()
            self._log(f"[LogReceiver ERROR] {self.cfg.address}: {e!r}")
            self._teardown_zmq()
            return

        self._ready_evt.set()
        try:
            self._loop()
        finally:
            self._teardown_zmq()

    def _setup_zmq(self) -> None:
        self._ctx = zmq.Context.instance()

        self._sock = self._ctx.socket(zmq.PULL)
        self._sock.setsockopt(zmq.LINGER, self.cfg.linger_ms)
        self._sock.bind(self.cfg.address)
        self._bound_address = self._sock.getsockopt_string(zmq.LAST_ENDPOINT)
        self._log(f"[LogReceiver] bound to {self._bound_address}")

        self._poller = zmq.Poller()
        self._poller.register(self._sock, zmq.POLLIN)

    def _teardown_zmq(self) -> None:
        if self._sock is not None:
            self._sock.close(linger=self.cfg.linger_ms)
        self._sock = None
        self._poller = None

        # Do NOT terminate Context.instance() here; forwarders may share it.
        self._ctx = None

    def _loop(self) -> None:
        while not self._stop_evt.is_set():
            events = dict(self._poller.poll(self.cfg.poll_timeout_ms))
            if self._sock in events:
                # Drain everything that is ready before polling again
                while True:
                    try:
                        frames = self._sock.recv_multipart(flags=zmq.NOBLOCK)
                    except zmq.Again:
                        break
                    # Payload is always the last frame
                    self._in_q.put(frames[-1])


class LogForwarder:
    """
    Extension-side sender: ships rendered records to the controlling
    process, which filters and writes them under the remote call site.

    Sockets are used from the constructing thread only.
    """

    def __init__(self, address: str, *, context: Any = None, linger_ms: int = 1000):
        self.address = address
        self._ctx = context or zmq.Context.instance()
        self._sock = self._ctx.socket(zmq.PUSH)
        # Keep queued records long enough to reach the receiver on close
        self._sock.setsockopt(zmq.LINGER, linger_ms)
        self._sock.connect(address)

    def send(self, payload: bytes) -> None:
        self._sock.send(payload)

    def forward(self, level: LogLevel, location, callsite_id: str, fmt: str, *args) -> EmitOutcome:
        """
        Render locally and send.

        Returns TERMINATE for a fatal record so the caller can exit
        (after close()) once the record is on its way.
        """
        msg = LogMessage(
            level=int(LogLevel(level)),
            location=str(location),
            callsite_id=callsite_id,
            message=fmt % args,
        )
        self.send(msg.to_bytes())
        if msg.level == LogLevel.fatal:
            return EmitOutcome.TERMINATE
        return EmitOutcome.WRITTEN

    def close(self) -> None:
        if self._sock is not None:
            self._sock.close()
            self._sock = None
