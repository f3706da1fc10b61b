"""Structured logging for restrouter.

Usage:
    from restrouter.core.logging import configure_logging, get_logger, log_context

    configure_logging(log_level="DEBUG", log_format="json")
    logger = get_logger(__name__)

    with log_context(run_id="run-123", database="shop"):
        logger.info("model_registered", model="users")  # carries run_id and database

Events are snake_case names with keyword fields. Output goes to stderr so
that command output on stdout stays machine-readable.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator, MutableMapping
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, cast

import structlog
from structlog.typing import FilteringBoundLogger

# Fields scoped onto every event of the current pipeline run
_run_fields: ContextVar[dict[str, Any] | None] = ContextVar("restrouter_run_fields", default=None)

# Chatty third-party loggers kept at WARNING unless DEBUG is requested
_QUIET_LIBRARIES = ("sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite", "uvicorn.access")


def _merge_run_fields(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    fields = _run_fields.get()
    if fields:
        for key, value in fields.items():
            event_dict.setdefault(key, value)
    return event_dict


def configure_logging(
    log_level: str = "INFO",
    log_format: str = "console",
    *,
    show_timestamps: bool = True,
    color: bool | None = None,
) -> None:
    """Configure structlog and the stdlib loggers of the libraries underneath.

    Args:
        log_level: DEBUG, INFO, WARNING or ERROR
        log_format: "console" for humans, "json" for log shippers
        show_timestamps: Prefix events with an ISO UTC timestamp
        color: Colorize console output (default: only when stderr is a terminal)
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    if color is None:
        color = sys.stderr.isatty()

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        _merge_run_fields,
        structlog.processors.add_log_level,
    ]
    if show_timestamps:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso", utc=True))

    if log_format == "json":
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=color,
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(levelname)s %(name)s: %(message)s",
        level=level,
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )
    for name in _QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(level if level <= logging.DEBUG else logging.WARNING)


def get_logger(name: str | None = None) -> FilteringBoundLogger:
    return cast(FilteringBoundLogger, structlog.get_logger(name))


@contextmanager
def log_context(**fields: Any) -> Iterator[dict[str, Any]]:
    """Scope fields onto every event logged inside the block.

    Nested scopes add to (and may override) the enclosing one.
    """
    merged = {**(_run_fields.get() or {}), **fields}
    token = _run_fields.set(merged)
    try:
        yield merged
    finally:
        _run_fields.reset(token)


def current_log_context() -> dict[str, Any]:
    """Copy of the fields currently scoped by log_context()."""
    return dict(_run_fields.get() or {})


configure_logging()
