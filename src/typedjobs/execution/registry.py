"""Job Registry - injectable name → job class lookup.

Manifesto:
A broker worker receives ``(job_name, payload)`` and must find the job class
that knows how to read the payload.  The registry decouples registration
(at import time, via ``@register_job``) from resolution (at dispatch time),
and supports both a global singleton and injectable instances for testing.

ARCHITECTURE
────────────
::

    JobRegistry
      ├── .register(job_cls)   ─ store under job_cls.job_name
      ├── .get(name)           ─ lookup (UnknownJobError if missing)
      ├── .has(name)           ─ existence check
      ├── .list_jobs()         ─ sorted names
      └── .unregister(name)

    register_job                 ─ decorator (global registry by default)
    get_default_job_registry()   ─ module-level singleton
    reset_default_job_registry() ─ clear for testing

BEST PRACTICES
──────────────
- Import every module that defines jobs in the worker process, so their
  ``@register_job`` decorators run before the first dispatch.
- Pass an explicit ``JobRegistry`` in tests.

Tags:
    typedjobs, execution, registry, job-registry, lookup

Doc-Types:
    api-reference
"""

from collections.abc import Callable
from typing import Any, TypeVar, overload

from ..core.errors import UnknownJobError
from ..schema.registry import job_display_name

J = TypeVar("J", bound=type)


class JobRegistry:
    """Injectable job registry.

    Example:
        >>> registry = JobRegistry()
        >>>
        >>> @register_job(registry=registry)
        ... class SendEmail(Job):
        ...     ...
        >>>
        >>> registry.get("SendEmail") is SendEmail
        True
    """

    def __init__(self):
        self._jobs: dict[str, type] = {}

    def register(self, job_cls: type) -> None:
        """Register a job class under its ``job_name``."""
        self._jobs[job_display_name(job_cls)] = job_cls

    def get(self, name: str) -> Any:
        """Get a job class by name.

        Raises:
            UnknownJobError: If no job is registered under ``name``
        """
        try:
            return self._jobs[name]
        except KeyError:
            raise UnknownJobError(name, self.list_jobs()) from None

    def has(self, name: str) -> bool:
        """Check if a job is registered."""
        return name in self._jobs

    def list_jobs(self) -> list[str]:
        """Sorted names of all registered jobs."""
        return sorted(self._jobs)

    def unregister(self, name: str) -> bool:
        """Unregister a job; returns True if it was present."""
        return self._jobs.pop(name, None) is not None

    def clear(self) -> None:
        """Clear all jobs (for testing)."""
        self._jobs.clear()


# === GLOBAL DEFAULT REGISTRY ===

_default_registry: JobRegistry | None = None


def get_default_job_registry() -> JobRegistry:
    """Get the global job registry, creating it on first access."""
    global _default_registry
    if _default_registry is None:
        _default_registry = JobRegistry()
    return _default_registry


def reset_default_job_registry() -> None:
    """Reset the global job registry (for testing)."""
    global _default_registry
    _default_registry = None


# === DECORATOR API ===


@overload
def register_job(job_cls: J) -> J: ...
@overload
def register_job(job_cls: None = None, *, registry: JobRegistry | None = None) -> Callable[[J], J]: ...


def register_job(job_cls=None, *, registry=None):
    """Class decorator registering a job so workers can dispatch it by name.

    Usable bare or with options:

        @register_job
        class SendEmail(Job): ...

        @register_job(registry=test_registry)
        class SendEmail(Job): ...
    """

    def decorator(cls):
        (registry or get_default_job_registry()).register(cls)
        return cls

    if job_cls is not None:
        return decorator(job_cls)
    return decorator
