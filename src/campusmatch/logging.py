"""Logging utilities for the eligibility engine."""

from __future__ import annotations

import logging

import structlog

LOG_FORMATS = ("json", "console")


def configure_logging(level: str = "INFO", log_format: str = "json") -> None:
    """Configure structlog.

    Events carry any job context bound with ``structlog.contextvars``; output
    is one JSON object per line unless ``log_format`` is ``"console"``.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(level=log_level, format="%(message)s")

    if log_format == "console":
        renderer = structlog.dev.ConsoleRenderer(colors=False)
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.dict_tracebacks,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=True,
    )
