"""Structured logging configuration using structlog."""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

import orjson
import structlog
from structlog.types import Processor

from src.core.config import settings

# Context variables for review-session correlation
document_id_ctx: ContextVar[str | None] = ContextVar("document_id", default=None)
reviewer_ctx: ContextVar[str | None] = ContextVar("reviewer", default=None)


def _add_context_vars(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Attach the active document and reviewer to log events."""
    if document_id := document_id_ctx.get():
        event_dict["document_id"] = document_id
    if reviewer := reviewer_ctx.get():
        event_dict["reviewer"] = reviewer
    return event_dict


@contextmanager
def review_context(document_id: str, reviewer: str | None = None) -> Iterator[None]:
    """Bind the document (and reviewer) to every log event inside the block."""
    document_token = document_id_ctx.set(document_id)
    reviewer_token = reviewer_ctx.set(reviewer) if reviewer is not None else None
    try:
        yield
    finally:
        document_id_ctx.reset(document_token)
        if reviewer_token is not None:
            reviewer_ctx.reset(reviewer_token)


def _orjson_serializer(obj: Any, **kwargs: Any) -> str:
    """Serialize a log event with orjson.

    Decimal amounts show up in calculation events, so they are rendered
    as strings rather than failing the log call.
    """
    return orjson.dumps(obj, default=str).decode("utf-8")


def configure_logging() -> None:
    """Configure structlog for the engine.

    Development mode: ConsoleRenderer with colors for readability.
    Other environments: JSONRenderer with orjson for structured logging.
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        _add_context_vars,
    ]

    log_format = settings.log_format.lower() if settings.log_format else None
    use_json = log_format == "json" or (
        log_format is None and settings.environment != "development"
    )

    if use_json:
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.EventRenamer("message"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(serializer=_orjson_serializer),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if settings.debug else logging.INFO,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a configured structlog logger.

    Args:
        name: Optional logger name, usually the calling module's __name__.

    Returns:
        Configured structlog bound logger.
    """
    return structlog.get_logger(name)
