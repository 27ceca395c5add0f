"""
typedjobs logging - structured logging via structlog.

Both sides of the pipeline log through this module: the submitting process
(``job_submitted``, ``job_args_invalid``) and the broker worker
(``job_dispatched``, ``job_failed``).  Events carry the job name and, where
known, the broker's job id, so a submission and its eventual dispatch can be
correlated in a log aggregator.

Architecture:
    ::

        configure_logging(level="INFO", json_format=None, service="typedjobs")
            │
            ▼
        processor chain:
          1. TimeStamper(iso)
          2. merge_contextvars     (LogContext / bind_context)
          3. add_log_level
          4. add_logger_name
          5. StackInfoRenderer, set_exc_info
          6. _add_service_metadata
          7. JSONRenderer (non-tty) | ConsoleRenderer (tty)

Examples:
    >>> from typedjobs.core.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG", json_format=False)
    >>> logger = get_logger(__name__)
    >>> with LogContext(job="SendEmail", job_id="abc123"):
    ...     logger.info("job_dispatched")

Tags:
    logging, structlog, observability, typedjobs

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

_SERVICE_NAME = "typedjobs"


def _add_service_metadata(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add service-level metadata to all logs."""
    event_dict.setdefault("service", _SERVICE_NAME)
    return event_dict


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = "typedjobs",
    add_timestamp: bool = True,
) -> None:
    """Configure structured logging for the process.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: True for JSON, False for console, None for auto (JSON if not tty)
        service: Service name included in every event
        add_timestamp: Include ISO timestamp in logs
    """
    global _SERVICE_NAME
    _SERVICE_NAME = service

    if json_format is None:
        json_format = not sys.stdout.isatty()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        _add_service_metadata,
    ]

    if add_timestamp:
        shared_processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_format:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper())),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper()),
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structlog logger (usually ``get_logger(__name__)``)."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind context to include in all subsequent logs on this thread/task."""
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    """Remove specific keys from logging context."""
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    """Clear all bound context."""
    structlog.contextvars.clear_contextvars()


class LogContext:
    """Context manager for scoped logging context.

    Example:
        with LogContext(job="SendEmail", job_id="abc123"):
            logger.info("job_dispatched")
        # job / job_id back to their previous values (or unbound) here
    """

    def __init__(self, **kwargs: Any):
        self._context = kwargs
        self._bound: Any = None

    def __enter__(self) -> LogContext:
        self._bound = structlog.contextvars.bound_contextvars(**self._context)
        self._bound.__enter__()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self._bound.__exit__(*exc_info)
        self._bound = None


__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "unbind_context",
    "clear_context",
    "LogContext",
]
