"""Threaded Gopher server with a bounded number of connection handlers."""

import os
import socket
import socketserver
import threading
from typing import Any

import structlog

from gopherd.config import Settings
from gopherd.content.loader import FileSystemError, ScriptError
from gopherd.dispatcher import Dispatcher

logger = structlog.get_logger()

MAX_WORKERS = 10
SHUTDOWN_TIMEOUT = 5.0
SLOT_POLL_INTERVAL = 0.5


class GopherRequestHandler(socketserver.StreamRequestHandler):
    """Handles one connection: one request line in, one response out."""

    server: "GopherServer"

    def handle(self) -> None:
        server = self.server
        log = logger.bind(peer=f"{self.client_address[0]}:{self.client_address[1]}")
        try:
            server.dispatcher.handle(
                self.rfile,
                self.wfile,
                server.host,
                server.port,
                server.root,
            )
        except (FileSystemError, ScriptError) as e:
            log.error("response_failed", error=str(e), path=e.path)
        except OSError as e:
            log.error("response_failed", error=str(e))


class GopherServer(socketserver.ThreadingMixIn, socketserver.TCPServer):
    """Threaded TCP server with a ceiling on simultaneous handlers.

    Each connection runs on its own daemon thread once one of
    ``max_workers`` slots is free. Closing the server waits at most
    ``shutdown_timeout`` seconds for handlers still running, so a hung
    script cannot hold the process open.

    Attributes:
        host: Hostname advertised in menus.
        port: Port advertised in menus.
        root: Canonical root directory being served.
        dispatcher: Shared, stateless response dispatcher.
        shutdown_timeout: Seconds ``server_close`` waits for handlers.
    """

    allow_reuse_address = True
    daemon_threads = True
    block_on_close = False

    def __init__(
        self,
        bind_address: tuple[str, int],
        host: str,
        port: int,
        root: str,
        max_workers: int = MAX_WORKERS,
        verbose: bool = True,
        shutdown_timeout: float = SHUTDOWN_TIMEOUT,
    ) -> None:
        """Bind the listening socket.

        Args:
            bind_address: Interface and port to listen on.
            host: Hostname advertised in menus.
            port: Port advertised in menus.
            root: Directory to serve.
            max_workers: Maximum number of simultaneous handlers.
            verbose: Log a status event for every response.
            shutdown_timeout: Seconds to wait for running handlers on close.

        Raises:
            FileSystemError: If the root does not exist.
        """
        if not os.path.isdir(root):
            raise FileSystemError(f"Root directory not found: {root}", root, "ENOENT")
        self.host = host
        self.port = port
        self.root = os.path.realpath(root)
        self.dispatcher = Dispatcher(verbose=verbose)
        self.shutdown_timeout = shutdown_timeout
        self._slots = threading.BoundedSemaphore(max_workers)
        self._idle = threading.Condition()
        self._active = 0
        self._stopping = threading.Event()
        super().__init__(bind_address, GopherRequestHandler)

    @classmethod
    def from_settings(cls, settings: Settings) -> "GopherServer":
        """Create a server from configuration."""
        return cls(
            settings.bind_address,
            settings.host,
            settings.port,
            settings.root,
            max_workers=settings.max_workers,
            shutdown_timeout=settings.shutdown_timeout,
        )

    @property
    def bound_port(self) -> int:
        """Port the socket is actually bound to."""
        return self.socket.getsockname()[1]

    @property
    def active_handlers(self) -> int:
        """Number of connections currently being handled."""
        with self._idle:
            return self._active

    def process_request(self, request: Any, client_address: Any) -> None:
        # Blocks the accept loop while every slot is taken.
        while not self._slots.acquire(timeout=SLOT_POLL_INTERVAL):
            if self._stopping.is_set():
                self.shutdown_request(request)
                return
        with self._idle:
            self._active += 1
        if self.dispatcher.verbose:
            logger.info("connection_accepted", peer=f"{client_address[0]}:{client_address[1]}")
        try:
            super().process_request(request, client_address)
        except Exception:
            self._release()
            raise

    def process_request_thread(self, request: socket.socket, client_address: Any) -> None:
        try:
            super().process_request_thread(request, client_address)
        finally:
            self._release()

    def _release(self) -> None:
        with self._idle:
            self._active -= 1
            self._idle.notify_all()
        self._slots.release()

    def handle_error(self, request: Any, client_address: Any) -> None:
        logger.exception("handler_crashed", peer=str(client_address))

    def shutdown(self) -> None:
        self._stopping.set()
        super().shutdown()

    def drain(self, timeout: float | None = None) -> bool:
        """Wait for running handlers to finish.

        Args:
            timeout: Seconds to wait, uses ``shutdown_timeout`` if None.

        Returns:
            True if every handler finished, False if the timeout expired.
        """
        t = timeout if timeout is not None else self.shutdown_timeout
        with self._idle:
            if self._idle.wait_for(lambda: self._active == 0, t):
                return True
            remaining = self._active
        logger.warning("shutdown_timeout", timeout_seconds=t, active_handlers=remaining)
        return False

    def server_close(self) -> None:
        super().server_close()
        self.drain()
