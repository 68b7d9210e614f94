"""structlog setup for Lambda (JSON to CloudWatch) and local console runs."""

from __future__ import annotations

import logging
from typing import Any

import structlog


def _level_number(level: str) -> int:
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO


def _render_chain(fmt: str) -> list[Any]:
    if fmt == "json":
        # exc_info becomes a rendered "exception" string before serialization.
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer()]


def configure_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Configure structlog process-wide. Safe to call more than once."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            *_render_chain(fmt),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_level_number(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(component: str, **initial: Any) -> Any:
    """Return a lazily bound logger carrying the component name."""
    return structlog.get_logger(component=component, **initial)
