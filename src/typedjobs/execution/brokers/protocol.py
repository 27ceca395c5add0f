"""Broker Protocol - the interface the submission pipeline forwards to.

Manifesto:
The pipeline validates and serializes; it never queues anything itself.
Whatever actually stores and later runs the job (Celery, the in-memory
broker used in tests) only has to accept a payload and hand back an id.
``Broker`` is a ``typing.Protocol``, so no base class is required.

ARCHITECTURE
────────────
::

    Broker (Protocol)
      ├── .submit(job_name, payload)               ─ run as soon as possible
      ├── .schedule_at(job_name, when, payload)    ─ run at a wall-clock time
      └── .schedule_in(job_name, delay, payload)   ─ run after N seconds

    Implementations:
      CeleryBroker  ─ Celery send_task   (production)
      MemoryBroker  ─ in-process list    (testing / development)

    Contract for the worker side: when the broker decides to run a job it
    calls ``JobPipeline.dispatch(payload)`` with the exact payload it was
    given.  Retries, ordering and persistence are the broker's business.

Tags:
    typedjobs, execution, broker, protocol, interface

Doc-Types:
    api-reference
"""

from datetime import datetime
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Broker(Protocol):
    """Job broker - how a serialized job gets queued.

    A broker may also expose a ``name`` attribute; the pipeline adds it to
    the ``job_submitted`` and ``job_scheduled`` log events.

    Example implementation:
        >>> class PrintBroker:
        ...     def submit(self, job_name, payload):
        ...         print(job_name, payload)
        ...         return "printed"
        ...
        ...     def schedule_at(self, job_name, when, payload):
        ...         return self.submit(job_name, payload)
        ...
        ...     def schedule_in(self, job_name, delay, payload):
        ...         return self.submit(job_name, payload)
    """

    def submit(self, job_name: str, payload: dict[str, Any]) -> str:
        """Queue a job for immediate execution.

        Args:
            job_name: Registered name of the job
            payload: String-keyed, JSON-compatible arguments

        Returns:
            Broker job identifier
        """
        ...

    def schedule_at(self, job_name: str, when: datetime, payload: dict[str, Any]) -> str:
        """Queue a job to run at ``when`` (timezone-aware UTC)."""
        ...

    def schedule_in(self, job_name: str, delay: float, payload: dict[str, Any]) -> str:
        """Queue a job to run ``delay`` seconds from now."""
        ...
