# src/grouplog/ipc/log_bridge_entry.py

import argparse
import sys

import zmq

from grouplog.config.verbosity_config import VerbositySpecError, apply_verbosity_spec
from grouplog.ipc.ipc_log_bridge import IPCLogBridge
from grouplog.ipc.log_endpoint import LogEndpointConfig, LogReceiver
from grouplog.logging import log_api
from grouplog.logging.log_dispatcher import LogDispatcher
from grouplog.logging.verbosity_registry import VerbosityRegistry


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Receive forwarded log records and write them to stderr")
    parser.add_argument("--bind", required=True, help="Receiver address (e.g. tcp://127.0.0.1:5600, ipc:///tmp/log)")
    parser.add_argument(
        "--log",
        action="append",
        default=[],
        metavar="SPEC",
        help="Verbosity spec, e.g. 'debug' or 'warn,core/ipc=debug' (repeatable)",
    )
    parser.add_argument("--poll", type=float, default=0.1, help="Seconds to wait for a record per loop")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    registry = VerbosityRegistry()
    try:
        for spec in args.log:
            apply_verbosity_spec(registry, spec)
    except VerbositySpecError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    dispatcher = LogDispatcher(registry)
    log_api.install(dispatcher=dispatcher)
    bridge = IPCLogBridge(dispatcher)
    logger = log_api.Logger("grouplog/ipc/log_bridge_entry.py", dispatcher)

    receiver = LogReceiver(LogEndpointConfig(address=args.bind), logger=lambda s: logger.verbose("%s", s))
    receiver.start()
    try:
        try:
            address = receiver.wait_ready(timeout=5.0)
        except (zmq.ZMQError, TimeoutError) as e:
            print(f"error: cannot listen on {args.bind}: {e}", file=sys.stderr)
            return 2
        logger.info("listening on %s", address)
        while True:
            payload = receiver.recv(timeout=args.poll)
            if payload is not None:
                bridge.receive(payload)
                bridge.pump(receiver)
    except KeyboardInterrupt:
        pass
    finally:
        receiver.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
