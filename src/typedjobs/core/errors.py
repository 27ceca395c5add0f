"""
Structured error types for typedjobs.

Every failure the argument pipeline can surface is a ``TypedJobError``.  The
taxonomy is deliberately small and closed so callers (and brokers) can decide
what to do from the type alone:

- ``SchemaNotDefinedError`` - a job declares ``Args`` but it is not a
  pydantic model.
- ``InvalidArgsError`` - strict validation failed at submission time.
- ``SerializationError`` - the payload could not be produced (outbound) or
  read back (inbound).
- ``TypedJobError`` itself - the job body raised something else, or never
  implemented ``run()``.

Manifesto:
    - **Closed taxonomy:** Four kinds, one base class
    - **Self-describing messages:** Every message names the job and the
      operation that failed
    - **Pass-through vs wrapped:** Taxonomy errors are never re-wrapped;
      foreign exceptions from the job body are wrapped exactly once
    - **Error chaining:** The original exception is kept as ``cause``

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────┐
        │                     TypedJobError                         │
        │         (category, context, cause)  "generic Error"      │
        ├──────────────────────────────────────────────────────────┤
        │  SchemaNotDefinedError   InvalidArgsError                │
        │  (CONFIG)                (VALIDATION)                    │
        │                                                          │
        │  SerializationError      JobNotImplementedError          │
        │  (SERIALIZATION)         (EXECUTION, NotImplementedError)│
        │                                                          │
        │  UnknownJobError                                         │
        │  (CONFIG)                                                │
        └──────────────────────────────────────────────────────────┘

Examples:
    >>> error = InvalidArgsError("Invalid arguments for SendEmail: ...")
    >>> error.category
    <ErrorCategory.VALIDATION: 'VALIDATION'>
    >>> error.with_context(job="SendEmail", operation="submit").to_dict()["context"]
    {'job': 'SendEmail', 'operation': 'submit'}

Guardrails:
    ❌ DON'T: Wrap a TypedJobError in another TypedJobError
    ✅ DO: Use is_passthrough() before wrapping job-body exceptions

    ❌ DON'T: Swallow the original exception
    ✅ DO: Pass it as cause= (or raise ... from exc)

Tags:
    error-handling, exception-hierarchy, error-context, typedjobs

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Categories used to route and report pipeline errors."""

    CONFIG = "CONFIG"                  # Bad schema declaration, unknown job
    VALIDATION = "VALIDATION"          # Strict submission-time validation
    SERIALIZATION = "SERIALIZATION"    # Wire encode/decode failures
    EXECUTION = "EXECUTION"            # Job body failures


@dataclass
class ErrorContext:
    """
    Structured metadata attached to a ``TypedJobError``.

    Attributes:
        job: Name of the job the error belongs to
        operation: Pipeline operation (submit, schedule_at, dispatch, run, ...)
        job_id: Broker job identifier, when known
        metadata: Any additional fields
    """

    job: str | None = None
    operation: str | None = None
    job_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, excluding None values."""
        result: dict[str, Any] = {}
        for key in ("job", "operation", "job_id"):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        result.update(self.metadata)
        return result


class TypedJobError(Exception):
    """
    Base class for all typedjobs errors, and the generic error kind.

    Raised directly when a job body fails with a foreign exception; the
    message then reads ``"Error in <job>#run: <message>"`` followed by the
    formatted traceback.

    Subclasses set ``default_category`` for their domain.

    Examples:
        >>> try:
        ...     raise RuntimeError("boom")
        ... except RuntimeError as e:
        ...     error = TypedJobError("Error in SendEmail#run: boom", cause=e)
        >>> error.cause
        RuntimeError('boom')
    """

    default_category: ErrorCategory = ErrorCategory.EXECUTION

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> TypedJobError:
        """
        Add context to this error (fluent API).

        Usage:
            raise InvalidArgsError(msg).with_context(job="SendEmail", operation="submit")
        """
        for key, value in kwargs.items():
            if key != "metadata" and hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


class SchemaNotDefinedError(TypedJobError):
    """A job declares ``Args`` but it is not a pydantic ``BaseModel`` subclass."""

    default_category = ErrorCategory.CONFIG


class InvalidArgsError(TypedJobError):
    """Submission-time (strict) validation of keyword arguments failed."""

    default_category = ErrorCategory.VALIDATION


class SerializationError(TypedJobError):
    """Arguments could not be serialized to, or deserialized from, a wire payload."""

    default_category = ErrorCategory.SERIALIZATION


class JobNotImplementedError(TypedJobError, NotImplementedError):
    """The job class never overrode ``run()``."""

    default_category = ErrorCategory.EXECUTION


class UnknownJobError(TypedJobError):
    """A worker received a payload for a job name nobody registered."""

    default_category = ErrorCategory.CONFIG

    def __init__(self, name: str, available: list[str] | None = None):
        self.name = name
        self.available = list(available or [])
        listing = ", ".join(self.available) or "none"
        super().__init__(f"No job registered as {name!r}. Available jobs: {listing}")
        self.with_context(job=name)

    def __reduce__(self):
        # Result backends pickle failures; rebuild from the constructor's arguments.
        return type(self), (self.name, self.available)


# =============================================================================
# HELPERS
# =============================================================================


def is_passthrough(error: BaseException) -> bool:
    """Return True if ``error`` must propagate without being wrapped."""
    return isinstance(error, TypedJobError)


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "TypedJobError",
    "SchemaNotDefinedError",
    "InvalidArgsError",
    "SerializationError",
    "JobNotImplementedError",
    "UnknownJobError",
    "is_passthrough",
]
