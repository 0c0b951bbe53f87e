"""
Structured logging for TurboAuth: one JSON object per event.

Each line carries event_type, level, logger name and an ISO UTC timestamp plus
whatever keyword context the caller passes (wallet_id, operation, ...).
LOG_LEVEL filters; LOG_FORMAT=console switches to the human-readable renderer.

No backend_turboauth imports here, so any module can import it first.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()


def configure_structlog(level: str = LOG_LEVEL, fmt: str = LOG_FORMAT) -> None:
    """Configure structlog processors and level filter."""
    renderers: list[Any]
    if fmt == "json":
        renderers = [
            structlog.processors.EventRenamer("event_type"),
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderers = [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
            structlog.processors.format_exc_info,
            *renderers,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level, logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a structured logger bound to the module name.

        logger = get_logger(__name__)
        logger.info("wallet_registered", wallet_id=addr, status="ACTIVE", trust_score=75)
    """
    return structlog.get_logger(name).bind(logger=name)
