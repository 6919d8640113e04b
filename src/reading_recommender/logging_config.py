"""
Structured logging configuration using structlog.

Sets up structlog once per process (API startup or CLI entry) and provides
helpers for binding per-request context such as the request id.
"""

import logging
import sys
from typing import Optional

import structlog

from .config import settings


SERVICE_NAME = "reading-recommender"


def setup_logging(
    log_level: Optional[str] = None,
    json_logs: Optional[bool] = None,
) -> None:
    """
    Configure structlog for structured logging.

    Args:
        log_level: Override for settings.log_level (e.g. "DEBUG" from the CLI)
        json_logs: Override for settings.log_json

    Processors:
    - Context variable merging (request_id, category, ...)
    - Log level and ISO timestamp
    - Exception info rendering
    - JSON or console rendering
    """
    level_name = (log_level or settings.log_level).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    use_json = settings.log_json if json_logs is None else json_logs

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            (
                structlog.processors.JSONRenderer()
                if use_json
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    # Third-party libraries (httpx, openai, uvicorn) log through stdlib logging
    logging.basicConfig(level=level, stream=sys.stderr, format="%(name)s %(levelname)s %(message)s")
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))


def bind_request_context(**values) -> None:
    """
    Bind key/value pairs to every log line emitted in the current context.

    Backed by contextvars, so concurrent requests do not leak into each other.
    """
    structlog.contextvars.bind_contextvars(service=SERVICE_NAME, **values)


def clear_request_context() -> None:
    """Drop all context bound with bind_request_context()."""
    structlog.contextvars.clear_contextvars()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a logger instance with the given name.

    Args:
        name: Logger name (usually __name__)

    Returns:
        structlog BoundLogger instance
    """
    return structlog.get_logger(name)
