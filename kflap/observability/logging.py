"""Structured logging configuration using structlog."""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

import structlog


def setup_logging(level: str = "warning", log_file: TextIO | None = None, *, quiet: bool = False) -> None:
    """Configure structlog for JSON output.

    Output goes to *log_file* when given, otherwise to stderr.  With *quiet*
    and no file, every entry is dropped so nothing is written over the live
    terminal view.
    """
    log_level = getattr(logging, level.upper(), logging.WARNING)

    logger_factory: Any
    if log_file is not None:
        logger_factory = structlog.PrintLoggerFactory(file=log_file)
    elif quiet:
        logger_factory = structlog.ReturnLoggerFactory()
    else:
        logger_factory = structlog.PrintLoggerFactory(file=sys.stderr)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="ts"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=logger_factory,
        cache_logger_on_first_use=False,
    )


def get_logger(component: str) -> structlog.stdlib.BoundLogger:
    """Get a logger bound with a component name."""
    return structlog.get_logger(component=component)  # type: ignore[return-value]
