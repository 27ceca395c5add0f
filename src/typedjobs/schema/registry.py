"""Schema Registry - resolve and cache each job's argument schema.

Manifesto:
A job's ``Args`` schema is static: declared once, in the class body.  The
pipeline needs it on every submission and dispatch, so it is located and
checked once per job class and cached here, keyed by class identity.

ARCHITECTURE
────────────
::

    SchemaRegistry
      ├── .resolve(job_cls)  ─ Args model | None   (memoized)
      ├── .is_cached(job_cls)
      └── .clear()

    get_default_schema_registry()   ─ module-level singleton
    reset_default_schema_registry() ─ clear for testing

CONCURRENCY
───────────
No lock.  Two threads resolving the same class for the first time both
compute the same model and both write it; the second write is harmless.
Failed resolutions are never cached, so a broken declaration raises every
time it is used.

Tags:
    typedjobs, schema, registry, memoization

Doc-Types:
    api-reference
"""

from typing import Any

from pydantic import BaseModel

from ..core.errors import SchemaNotDefinedError

ARGS_ATTRIBUTE = "Args"


def job_display_name(job_cls: type) -> str:
    """Name used for a job class in error messages and logs."""
    return getattr(job_cls, "job_name", None) or job_cls.__qualname__


def _describe(value: Any) -> str:
    if isinstance(value, type):
        return f"class {value.__module__}.{value.__qualname__}"
    return type(value).__name__


class SchemaRegistry:
    """Injectable, memoizing lookup of job argument schemas.

    Example:
        >>> registry = SchemaRegistry()
        >>> registry.resolve(SendEmail)
        <class 'app.jobs.SendEmail.Args'>
        >>> registry.resolve(Cleanup) is None  # no Args declared
        True
    """

    def __init__(self):
        self._schemas: dict[type, type[BaseModel] | None] = {}

    def resolve(self, job_cls: type) -> type[BaseModel] | None:
        """Return the ``Args`` model of ``job_cls``, or None if it declares none.

        Raises:
            SchemaNotDefinedError: If ``Args`` exists but is not a BaseModel subclass
        """
        try:
            return self._schemas[job_cls]
        except KeyError:
            pass

        candidate = getattr(job_cls, ARGS_ATTRIBUTE, None)
        if candidate is not None and not (
            isinstance(candidate, type) and issubclass(candidate, BaseModel)
        ):
            name = job_display_name(job_cls)
            raise SchemaNotDefinedError(
                f"{name}.{ARGS_ATTRIBUTE} must be a subclass of pydantic.BaseModel, "
                f"got {_describe(candidate)}"
            ).with_context(job=name, operation="resolve_schema")

        self._schemas[job_cls] = candidate
        return candidate

    def is_cached(self, job_cls: type) -> bool:
        """Check whether ``job_cls`` has already been resolved."""
        return job_cls in self._schemas

    def clear(self) -> None:
        """Drop every cached schema (for testing)."""
        self._schemas.clear()


# === GLOBAL DEFAULT REGISTRY ===

_default_registry: SchemaRegistry | None = None


def get_default_schema_registry() -> SchemaRegistry:
    """Get the global schema registry, creating it on first access."""
    global _default_registry
    if _default_registry is None:
        _default_registry = SchemaRegistry()
    return _default_registry


def reset_default_schema_registry() -> None:
    """Reset the global schema registry (for testing)."""
    global _default_registry
    _default_registry = None


def resolve_schema(job_cls: type) -> type[BaseModel] | None:
    """Resolve ``job_cls``'s argument schema through the default registry."""
    return get_default_schema_registry().resolve(job_cls)
