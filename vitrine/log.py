"""
Logging — structlog, one JSON object per line by default.

    from vitrine import log

    log.configure("info")
    logger = log.get_logger(__name__)
    logger.info("order_submitted", order_id="recA1B2C3", session_id=sid)
"""

from __future__ import annotations

import logging
from typing import Any

import structlog


def level_number(level: str | int) -> int:
    if isinstance(level, int):
        return level
    number = logging.getLevelNamesMapping().get(level.strip().upper())
    if number is None:
        raise ValueError(f"Unknown log level: {level!r}")
    return number


def configure(level: str | int = "info", json: bool = True) -> None:
    """Configure structlog for the process. Safe to call more than once."""
    renderer: Any = (
        structlog.processors.JSONRenderer()
        if json
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_number(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None, **context: Any) -> Any:
    """Lazy bound logger; name goes into every event as 'logger_name'."""
    if name:
        context["logger_name"] = name
    return structlog.get_logger(**context)


__all__ = ("level_number", "configure", "get_logger")
