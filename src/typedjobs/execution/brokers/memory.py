"""In-memory broker for testing and development.

Jobs are held in a list until :meth:`MemoryBroker.drain` runs them in the
current process.  Every payload goes through ``json.dumps``/``json.loads`` on
the way in, so a job that works here would survive a real JSON transport.
"""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

from ...core.logging import get_logger

if TYPE_CHECKING:
    from ..registry import JobRegistry

logger = get_logger(__name__)


@dataclass
class QueuedJob:
    """A job waiting in a MemoryBroker."""

    job_id: str
    job_name: str
    payload: dict[str, Any]
    eta: datetime | None = None

    def is_due(self, now: datetime) -> bool:
        return self.eta is None or self.eta <= now


class MemoryBroker:
    """In-memory broker - queues in a list, runs on ``drain()``.

    Perfect for:
    - Unit tests
    - Development
    - Debugging

    NOT for production (no persistence, lost on exit).

    Example:
        >>> broker = MemoryBroker(registry=registry)
        >>> job_id = broker.submit("Double", {"value": "21"})
        >>> broker.drain()
        [42]
    """

    def __init__(self, registry: JobRegistry | None = None):
        """Initialize with an optional job registry.

        Args:
            registry: Registry used to resolve job names on drain
                      (defaults to the global job registry)
        """
        self.registry = registry
        self.jobs: list[QueuedJob] = []

    @property
    def name(self) -> str:
        """Broker name, as logged with each submission."""
        return "memory"

    def submit(self, job_name: str, payload: dict[str, Any]) -> str:
        return self._enqueue(job_name, payload, eta=None)

    def schedule_at(self, job_name: str, when: datetime, payload: dict[str, Any]) -> str:
        return self._enqueue(job_name, payload, eta=when)

    def schedule_in(self, job_name: str, delay: float, payload: dict[str, Any]) -> str:
        return self._enqueue(job_name, payload, eta=_utcnow() + timedelta(seconds=delay))

    def _enqueue(self, job_name: str, payload: dict[str, Any], eta: datetime | None) -> str:
        job_id = f"mem-{uuid.uuid4().hex[:8]}"
        wire = json.loads(json.dumps(payload))
        self.jobs.append(QueuedJob(job_id=job_id, job_name=job_name, payload=wire, eta=eta))
        logger.debug("memory_job_queued", job=job_name, job_id=job_id, eta=eta)
        return job_id

    def jobs_for(self, job_name: str) -> list[QueuedJob]:
        """Jobs currently queued under ``job_name``."""
        return [job for job in self.jobs if job.job_name == job_name]

    def drain(self, now: datetime | None = None) -> list[Any]:
        """Dispatch every due job in submission order and return their results.

        A job is due when it has no ETA or its ETA is not after ``now``
        (default: current UTC time).  A job is removed from the queue before
        it runs; if it raises, the exception propagates and later jobs stay
        queued.
        """
        from ..registry import get_default_job_registry

        registry = self.registry or get_default_job_registry()
        now = now or _utcnow()
        results = []

        for queued in [job for job in self.jobs if job.is_due(now)]:
            self.jobs.remove(queued)
            job_cls = registry.get(queued.job_name)
            results.append(job_cls.dispatch(queued.payload))

        return results

    def clear(self) -> None:
        """Drop every queued job (for testing)."""
        self.jobs.clear()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)
