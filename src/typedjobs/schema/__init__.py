"""Schema layer: argument models, schema resolution and wire (de)serialization."""

from .adapter import WirePayload, deep_stringify_keys, deserialize, serialize
from .base import JobArgs
from .fields import field_keys, stringify_numbers, unknown_keys
from .registry import (
    SchemaRegistry,
    get_default_schema_registry,
    job_display_name,
    reset_default_schema_registry,
    resolve_schema,
)

__all__ = [
    "WirePayload",
    "deep_stringify_keys",
    "deserialize",
    "serialize",
    "JobArgs",
    "field_keys",
    "stringify_numbers",
    "unknown_keys",
    "SchemaRegistry",
    "get_default_schema_registry",
    "job_display_name",
    "reset_default_schema_registry",
    "resolve_schema",
]
