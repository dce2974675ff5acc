"""Structured logging configuration using ``structlog``.

Call :func:`setup_logging` once at application startup to configure
both ``structlog`` and the standard-library ``logging`` module.
"""

from __future__ import annotations

import logging
import sys

import structlog


def _stderr_logger_factory(*args: object) -> structlog.PrintLogger:
    # Looked up per call so redirected streams (CLI runners, pytest) are honoured.
    return structlog.PrintLogger(sys.stderr)


def setup_logging(log_level: str = "INFO") -> None:
    """Configure structured logging for the application.

    Log records go to stderr; stdout is reserved for command results.

    Args:
        log_level: Minimum severity level (e.g. ``"DEBUG"``, ``"INFO"``).
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    # Standard-library root logger
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=numeric_level,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=_stderr_logger_factory,
        cache_logger_on_first_use=False,
    )
