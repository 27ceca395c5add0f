"""Core primitives shared by the schema and execution layers: errors, logging, settings."""

from .errors import (
    ErrorCategory,
    ErrorContext,
    InvalidArgsError,
    JobNotImplementedError,
    SchemaNotDefinedError,
    SerializationError,
    TypedJobError,
    UnknownJobError,
    is_passthrough,
)
from .logging import LogContext, configure_logging, get_logger
from .settings import TypedJobsSettings, get_settings, reset_settings

__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "InvalidArgsError",
    "JobNotImplementedError",
    "SchemaNotDefinedError",
    "SerializationError",
    "TypedJobError",
    "UnknownJobError",
    "is_passthrough",
    "LogContext",
    "configure_logging",
    "get_logger",
    "TypedJobsSettings",
    "get_settings",
    "reset_settings",
]
