"""Structured logging configuration using structlog."""

import logging
import sys
from typing import Any

import structlog

from codehunt.config import Settings

# stdlib loggers that are too chatty at INFO for a busy event day
_QUIET_LOGGERS = ("uvicorn.access", "aiosqlite")


def configure_logging(settings: Settings) -> None:
    """
    Configure structlog and the stdlib root logger from settings.

    JSON lines in production (``log_json``), colored console output for local
    runs. Every entry carries the service name and version; request handlers
    add ``request_id`` and, once a team is resolved, ``team_id``.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.database_echo else logging.WARNING
    )

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    if settings.log_json:
        renderers: list[structlog.types.Processor] = [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderers = [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]

    structlog.configure(
        processors=[*shared_processors, *renderers],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        service=settings.service_name,
        version=settings.service_version,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def bind_request_context(request_id: str, **kwargs: Any) -> None:
    structlog.contextvars.bind_contextvars(request_id=request_id, **kwargs)


def bind_team(team_id: str) -> None:
    """Tag the rest of the request's log entries with the team."""
    structlog.contextvars.bind_contextvars(team_id=team_id)


def clear_request_context() -> None:
    """Drop per-request keys, keeping the service binding."""
    structlog.contextvars.unbind_contextvars("request_id", "team_id")
