"""Command that runs the payment processing server until it is interrupted."""

from __future__ import annotations

import argparse
import logging
import signal
import threading

from payproc.handler import RequestHandler
from payproc.protocol import LISTENER_PORT
from payproc.server import TcpServer
from payproc.validator import AmountValidator

logger = logging.getLogger(__name__)

_EXIT_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="payproc", description="Serve line-based payment requests over TCP."
    )
    parser.add_argument("--host", default="localhost", help="address to listen on")
    parser.add_argument("--port", type=int, default=LISTENER_PORT, help="port to listen on")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run the server until SIGINT or SIGTERM; return the exit status."""
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s.%(msecs)03d %(message)s",
        datefmt="%H:%M:%S",
    )

    shutdown = threading.Event()

    def _on_signal(signum: int, frame: object) -> None:
        shutdown.set()

    previous = {}
    if threading.current_thread() is threading.main_thread():
        for sig in _EXIT_SIGNALS:
            previous[sig] = signal.signal(sig, _on_signal)

    try:
        handler = RequestHandler(shutdown, AmountValidator())
        try:
            server = TcpServer(handler, shutdown, args.host, args.port)
        except OSError as exc:
            logger.error("error creating server: %s", exc)
            return 1

        server.start()
        while not shutdown.wait(0.5):
            pass
        logger.info("Received exit signal, stopping server...")
        server.stop()
        return 0
    finally:
        for sig, handler_before in previous.items():
            if handler_before is not None:
                signal.signal(sig, handler_before)