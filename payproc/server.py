"""Line-oriented TCP server that answers payment requests."""

from __future__ import annotations

import logging
import socket
import threading
import time
from collections.abc import Iterator
from typing import BinaryIO

from payproc.protocol import (
    ACTIVE_REQUEST_GRACE,
    LISTENER_PORT,
    READ_TIMEOUT,
    RequestHandlerProtocol,
)

logger = logging.getLogger(__name__)

# How often, in seconds, the accept loop looks at the shutdown flag.
_ACCEPT_POLL = 0.1
# Longest request line, in bytes, that a connection may send.
_MAX_LINE = 64 * 1024
# Smallest read timeout used once a connection's read deadline has passed.
_MIN_READ_TIMEOUT = 0.001


def _peer_name(conn: socket.socket) -> str:
    try:
        host, port = conn.getpeername()[:2]
    except OSError:
        return "?"
    return f"{host}:{port}"


class TcpServer:
    """Accepts connections and answers each newline-terminated request line.

    The listening socket is opened on construction, so a busy port raises
    ``OSError`` straight away. Setting ``shutdown`` (or calling ``stop``)
    closes the listener; connections already accepted keep being served
    while active ones are given a grace period to finish.
    """

    def __init__(
        self,
        handler: RequestHandlerProtocol,
        shutdown: threading.Event,
        host: str = "localhost",
        port: int = LISTENER_PORT,
    ) -> None:
        self.handler = handler
        self.shutdown = shutdown
        self._listener = socket.create_server((host, port))
        self._listener.settimeout(_ACCEPT_POLL)
        self.host, self.port = self._listener.getsockname()[:2]
        self._connections: dict[socket.socket, threading.Thread] = {}
        self._lock = threading.Lock()
        self._stop_lock = threading.Lock()
        self._stopped = False
        self._accept_thread: threading.Thread | None = None

    def start(self) -> None:
        """Begin accepting connections in the background."""
        self._accept_thread = threading.Thread(
            target=self._accept_loop, name="payproc-accept", daemon=True
        )
        self._accept_thread.start()
        threading.Thread(target=self._watch_shutdown, name="payproc-watch", daemon=True).start()

    def stop(self) -> None:
        """Close the listener, signal shutdown and let active connections finish.

        Waits at most the grace period for connections still being served.
        Calling it again after it has run returns at once.
        """
        with self._stop_lock:
            if self._stopped:
                return
            self._stopped = True

            logger.info("Server|CLOSE_LISTENER|Server closing the listener port.")
            try:
                self._listener.close()
            except OSError as exc:
                logger.info("Server|Error closing listener: %s", exc)

            logger.info("Server|INVOKE_SHUTDOWN|Server invoking the shutdown channel.")
            self.shutdown.set()

            if self._accept_thread is not None:
                logger.info("Server|WAIT_COMPLETE|Waiting for server to finish up.")
                self._accept_thread.join()
                logger.info("Server|FINISHED|Server has finished up.")

            with self._lock:
                pending = dict(self._connections)
            if not pending:
                logger.info("Server|NO_WAIT|No active connections. Shutting down.")
                return

            logger.info(
                "Server|WAIT_ACTIVE_CONNECTION|Allowing following %d connection(s) "
                "to complete before shutting down.",
                len(pending),
            )
            for conn in pending:
                logger.info("Server|Active connection: %s", _peer_name(conn))

            deadline = time.monotonic() + ACTIVE_REQUEST_GRACE
            for thread in pending.values():
                thread.join(max(0.0, deadline - time.monotonic()))
            if any(thread.is_alive() for thread in pending.values()):
                logger.info("Server|Terminating active requests.")

    def active_connections(self) -> int:
        """Return the number of connections currently being served."""
        with self._lock:
            return len(self._connections)

    def _watch_shutdown(self) -> None:
        self.shutdown.wait()
        logger.info("Server|CTX_DONE|Context cancelled, triggering server shutdown...")
        self.stop()

    def _accept_loop(self) -> None:
        logger.info(
            "Server|Listener: %s:%s|Server started accepting connections.", self.host, self.port
        )
        while not self.shutdown.is_set():
            try:
                conn, _ = self._listener.accept()
            except OSError:
                continue
            peer = _peer_name(conn)
            logger.info("Server|C:%s|An incoming connection signaled the connection listener.", peer)
            thread = threading.Thread(
                target=self._serve, args=(conn, peer), name=f"payproc-conn-{peer}", daemon=True
            )
            with self._lock:
                self._connections[conn] = thread
            thread.start()
        logger.info("Server|Signal received on shutdown channel. Exiting main server loop.")

    def _serve(self, conn: socket.socket, peer: str) -> None:
        logger.info("Server|C:%s|Handling incoming connection.", peer)
        try:
            with conn.makefile("rb") as reader:
                for request in self._read_requests(conn, reader, peer):
                    logger.info("Server||C:%s||Request received: %s", peer, request)
                    started = time.monotonic()
                    response = self.handler.handle_request(request)
                    logger.info(
                        "Server||C:%s||Request: %s||Writing response: %s||Duration:%.6fs",
                        peer,
                        request,
                        response,
                        time.monotonic() - started,
                    )
                    conn.settimeout(None)
                    try:
                        conn.sendall(f"{response}\n".encode())
                    except OSError as exc:
                        logger.info("Server|C:%s|Error writing response: %s.", peer, exc)
        finally:
            with self._lock:
                self._connections.pop(conn, None)
            try:
                conn.close()
            except OSError as exc:
                logger.info("Server|C:%s|Error closing connection: %s", peer, exc)

    @staticmethod
    def _read_requests(conn: socket.socket, reader: BinaryIO, peer: str) -> Iterator[str]:
        """Yield request lines until EOF, a read error or the read deadline."""
        deadline = time.monotonic() + READ_TIMEOUT
        while True:
            conn.settimeout(max(deadline - time.monotonic(), _MIN_READ_TIMEOUT))
            try:
                raw = reader.readline(_MAX_LINE + 1)
            except OSError as exc:
                logger.info("Server||C:%s|Error reading from connection: %s", peer, exc)
                return
            if not raw:
                return

            terminated = raw.endswith(b"\n")
            if not terminated and len(raw) > _MAX_LINE:
                logger.info("Server||C:%s|Error reading from connection: line too long", peer)
                return
            line = raw[:-1] if terminated else raw
            if line.endswith(b"\r"):
                line = line[:-1]

            deadline = time.monotonic() + READ_TIMEOUT
            yield line.decode("utf-8", errors="replace")
            if not terminated:
                return