"""Structured logging configuration using structlog."""

import logging
from typing import Any, Dict, Optional, TextIO

import structlog
from rich.logging import RichHandler

from interview_feedback.config import settings


def _level_number(level: Optional[str]) -> int:
    return getattr(logging, (level or settings.log_level).upper(), logging.INFO)


def configure_logging(
    level: Optional[str] = None,
    debug: Optional[bool] = None,
    stream: Optional[TextIO] = None
) -> None:
    """
    Configure structlog for the feedback service.

    Stdlib records (uvicorn, httpx) go to a rich handler; structlog events
    are written one per line to ``stream``.

    Args:
        level: Minimum level name, defaults to ``settings.log_level``
        debug: Console renderer instead of JSON, defaults to ``settings.debug``
        stream: Destination for structlog events, defaults to stdout
    """
    level_number = _level_number(level)
    debug = settings.debug if debug is None else debug

    # No-op when the root logger already has handlers
    logging.basicConfig(
        format="%(message)s",
        level=level_number,
        handlers=[RichHandler(rich_tracebacks=True, show_path=debug)],
    )

    renderer = structlog.dev.ConsoleRenderer() if debug else structlog.processors.JSONRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_number),
        logger_factory=structlog.WriteLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def log_text_stats(text: str) -> Dict[str, Any]:
    """Create a log context describing free text without logging its content."""
    stripped = text.strip() if text else ""
    return {
        "text_length": len(stripped),
        "word_count": len(stripped.split()),
    }
