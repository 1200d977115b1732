"""Graceful shutdown coordinator for the server threads."""
import threading

import structlog

logger = structlog.get_logger()


class GracefulShutdown:
    """Coordinates shutdown between signal handlers and the main thread.

    Attributes:
        is_triggered: Whether shutdown has been triggered.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    @property
    def is_triggered(self) -> bool:
        """Check if shutdown has been triggered.

        Returns:
            True if shutdown signal received.
        """
        return self._event.is_set()

    def trigger(self, *_: object) -> None:
        """Signal waiting threads to begin shutdown.

        Accepts and ignores extra arguments so it can be installed
        directly with ``signal.signal``. Idempotent.
        """
        if self._event.is_set():
            return
        logger.info("shutdown_triggered")
        self._event.set()

    def wait_for_trigger(self) -> None:
        """Block until trigger() is called from a signal handler or thread."""
        self._event.wait()
