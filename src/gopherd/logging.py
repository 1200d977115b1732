"""Structured logging configuration using structlog."""

import logging
import sys
from typing import Literal

import structlog


def configure_logging(
    debug: bool = False,
    log_format: Literal["console", "json"] = "console",
) -> None:
    """Configure structlog for console or JSON output.

    Args:
        debug: Enable debug-level logging when True.
        log_format: ``console`` for colored key/value lines, ``json`` for
            one JSON object per event.
    """
    level = logging.DEBUG if debug else logging.INFO

    renderer: structlog.types.Processor
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=level,
        handlers=[logging.StreamHandler(sys.stderr)],
    )
