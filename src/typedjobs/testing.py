"""Test helpers for asserting on job argument schemas.

Each check comes in two forms: a predicate returning ``bool`` and an
``assert_*`` variant raising ``AssertionError`` with a readable message, for
use directly in pytest tests::

    from typedjobs.testing import assert_accepts_args, assert_has_arg, assert_rejects_args

    def test_send_receipt_args():
        assert_has_arg(SendReceipt, "order_id", int)
        assert_has_arg(SendReceipt, "resend", bool, default=False)
        assert_accepts_args(SendReceipt, order_id=1)
        assert_rejects_args(SendReceipt, order_id="1", error=InvalidArgsError)

Acceptance is decided by the same strict validation ``submit`` uses, without
touching a broker.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic_core import PydanticUndefined

from .core.errors import TypedJobError
from .execution.pipeline import JobPipeline

MISSING: Any = PydanticUndefined


def _fields(job_cls: type) -> dict[str, Any]:
    try:
        schema = JobPipeline(job_cls).schema()
    except TypedJobError:
        return {}
    return dict(schema.model_fields) if schema is not None else {}


def _check_has_arg(job_cls: type, field: str, expected_type: Any, default: Any) -> str | None:
    fields = _fields(job_cls)
    name = getattr(job_cls, "job_name", job_cls.__name__)

    if field not in fields:
        defined = ", ".join(fields) or "none"
        return f"expected {name}.Args to have argument {field!r}, but it was not defined. Defined arguments: {defined}"

    info = fields[field]
    if expected_type is not None and info.annotation != expected_type:
        return f"expected {name}.Args argument {field!r} to be {expected_type!r}, but was {info.annotation!r}"

    if default is not MISSING:
        if info.is_required():
            return f"expected {name}.Args argument {field!r} to have a default value, but it was required"
        actual = info.get_default(call_default_factory=True)
        if actual != default:
            return f"expected {name}.Args argument {field!r} to have default value {default!r}, but was {actual!r}"

    return None


def has_arg(job_cls: type, field: str, expected_type: Any = None, *, default: Any = MISSING) -> bool:
    """True if the job declares ``field`` (optionally of ``expected_type`` / with ``default``)."""
    return _check_has_arg(job_cls, field, expected_type, default) is None


def assert_has_arg(job_cls: type, field: str, expected_type: Any = None, *, default: Any = MISSING) -> None:
    failure = _check_has_arg(job_cls, field, expected_type, default)
    if failure:
        raise AssertionError(failure)


def _try_build(job_cls: type, kwargs: dict[str, Any]) -> Exception | None:
    try:
        JobPipeline(job_cls).build_arguments(**kwargs)
    except TypedJobError as exc:
        return exc
    return None


def accepts_args(job_cls: type, **kwargs: Any) -> bool:
    """True if ``submit(**kwargs)`` would pass argument validation."""
    return _try_build(job_cls, kwargs) is None


def assert_accepts_args(job_cls: type, **kwargs: Any) -> None:
    error = _try_build(job_cls, kwargs)
    if error is not None:
        raise AssertionError(
            f"expected {job_cls.__name__} to accept arguments {kwargs!r}, "
            f"but it raised {type(error).__name__}: {error}"
        )


def _check_rejects(
    job_cls: type, kwargs: dict[str, Any], error: type[Exception] | None, match: str | None
) -> str | None:
    raised = _try_build(job_cls, kwargs)
    if raised is None:
        return f"expected {job_cls.__name__} to reject arguments {kwargs!r}, but it accepted them"
    if error is not None and not isinstance(raised, error):
        return f"expected {job_cls.__name__} to raise {error.__name__}, but raised {type(raised).__name__}"
    if match is not None and not re.search(match, str(raised)):
        return f"expected error message to match {match!r}, but was {str(raised)!r}"
    return None


def rejects_args(
    job_cls: type,
    *,
    error: type[Exception] | None = None,
    match: str | None = None,
    **kwargs: Any,
) -> bool:
    """True if ``submit(**kwargs)`` would fail validation (optionally with ``error`` / ``match``)."""
    return _check_rejects(job_cls, kwargs, error, match) is None


def assert_rejects_args(
    job_cls: type,
    *,
    error: type[Exception] | None = None,
    match: str | None = None,
    **kwargs: Any,
) -> None:
    failure = _check_rejects(job_cls, kwargs, error, match)
    if failure:
        raise AssertionError(failure)


__all__ = [
    "MISSING",
    "accepts_args",
    "assert_accepts_args",
    "assert_has_arg",
    "assert_rejects_args",
    "has_arg",
    "rejects_args",
]
