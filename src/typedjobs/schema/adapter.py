"""Coercion/Serialization Adapter - typed arguments to and from wire payloads.

The two directions are intentionally asymmetric:

- **Outbound** (:func:`serialize`) never coerces.  Arguments were built in
  strict mode, so they are already exactly typed; pydantic only has to turn
  them into JSON-safe values (nested models, lists, dicts, enums, dates),
  keyed by alias where a field declares one so the payload validates back.
- **Inbound** (:func:`deserialize`) always coerces.  A JSON transport loses
  type fidelity (``"42"`` for ``42``, ``"true"`` for ``True``), so the
  payload is validated in pydantic's lax mode, after numbers bound for
  ``str`` fields are turned into their decimal text.

Each direction has one failure path: whatever pydantic raises (or returns
that is unusable) becomes a ``SerializationError`` naming the job.

Examples:
    >>> payload = serialize("SendEmail", SendEmail.Args(user_id=7))
    >>> payload
    {'user_id': 7, 'notify': False}
    >>> deserialize("SendEmail", SendEmail.Args, {"user_id": "7", "notify": "false"})
    Args(user_id=7, notify=False)

Tags:
    typedjobs, serialization, coercion, pydantic, wire-format

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from ..core.errors import SerializationError
from .fields import stringify_numbers

WirePayload = dict[str, Any]


def deep_stringify_keys(obj: Any) -> Any:
    """Recursively convert every mapping key to ``str``, descending into lists and tuples."""
    if isinstance(obj, Mapping):
        return {str(key): deep_stringify_keys(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [deep_stringify_keys(value) for value in obj]
    return obj


def serialize(job_name: str, args: BaseModel | None) -> WirePayload:
    """Serialize typed arguments into a string-keyed, JSON-compatible payload.

    Args:
        job_name: Job the arguments belong to (used in error messages)
        args: Arguments built by the submission pipeline, or None

    Returns:
        The wire payload; ``{}`` when the job takes no arguments

    Raises:
        SerializationError: If the model cannot be dumped
    """
    if args is None:
        return {}

    try:
        dumped = args.model_dump(mode="json", by_alias=True)
        if not isinstance(dumped, Mapping):
            raise TypeError(f"serializer returned {type(dumped).__name__}, expected a mapping")
        return deep_stringify_keys(dumped)
    except Exception as exc:
        raise SerializationError(
            f"Failed to serialize args for {job_name}: {exc}", cause=exc
        ).with_context(job=job_name, operation="serialize") from exc


def deserialize(
    job_name: str, schema: type[BaseModel] | None, payload: Any
) -> BaseModel | None:
    """Rebuild typed arguments from a wire payload, coercing values as needed.

    Args:
        job_name: Job the payload belongs to (used in error messages)
        schema: The job's ``Args`` model, or None for argument-less jobs
        payload: The payload exactly as the broker delivered it

    Returns:
        An instance of ``schema``, or None when ``schema`` is None

    Raises:
        SerializationError: If the payload cannot be coerced into ``schema``
    """
    if schema is None:
        return None

    try:
        if not isinstance(payload, Mapping):
            raise TypeError(f"payload must be a mapping, got {type(payload).__name__}")
        return schema.model_validate(stringify_numbers(schema, payload))
    except Exception as exc:
        raise SerializationError(
            f"Failed to deserialize args for {job_name}: {exc}", cause=exc
        ).with_context(job=job_name, operation="deserialize") from exc
