"""Celery Broker - queue serialized jobs through a Celery app.

WHY
───
Celery already provides durable queues, ETA/countdown scheduling, retries
and a worker model.  This broker only has to name the dispatch task and pass
``[job_name, payload]`` as its positional arguments; the worker side
(:mod:`typedjobs.execution.tasks`) turns them back into a typed job run.

ARCHITECTURE
────────────
::

    CeleryBroker(app, task_name="typedjobs.dispatch", queue="default")
      ├── .submit(name, payload)             ─ app.send_task(...)
      ├── .schedule_at(name, when, payload)  ─ app.send_task(..., eta=when)
      └── .schedule_in(name, delay, payload) ─ app.send_task(..., countdown=delay)

    Routing to another queue: give the job class its own broker,
    ``broker = CeleryBroker(app, queue="mail")``.

Related modules:
    protocol.py - Broker protocol
    ../tasks.py - worker-side dispatch task
    memory.py   - in-process alternative
"""

from datetime import datetime
from typing import Any

from celery import Celery

from ...core.logging import get_logger
from ...core.settings import get_settings

logger = get_logger(__name__)


class CeleryBroker:
    """Celery-backed broker.

    Example:
        >>> from celery import Celery
        >>>
        >>> app = Celery("typedjobs", broker="redis://localhost:6379/0")
        >>> broker = CeleryBroker(app)
        >>> broker.submit("SendEmail", {"user_id": 7})
        'c0ffee00-...'
    """

    def __init__(
        self,
        celery_app: Celery,
        task_name: str | None = None,
        queue: str | None = None,
    ):
        """Initialize with a configured Celery app.

        Args:
            celery_app: Celery instance used to send tasks
            task_name: Dispatch task name (defaults to settings.dispatch_task_name)
            queue: Queue to send to (defaults to settings.default_queue)
        """
        settings = get_settings()
        self.celery_app = celery_app
        self.task_name = task_name or settings.dispatch_task_name
        self.queue = queue or settings.default_queue

    @property
    def name(self) -> str:
        """Broker name, as logged with each submission."""
        return "celery"

    def submit(self, job_name: str, payload: dict[str, Any]) -> str:
        """Send the dispatch task for immediate execution; returns the Celery task id."""
        return self._send(job_name, payload)

    def schedule_at(self, job_name: str, when: datetime, payload: dict[str, Any]) -> str:
        """Send the dispatch task with an ETA."""
        return self._send(job_name, payload, eta=when)

    def schedule_in(self, job_name: str, delay: float, payload: dict[str, Any]) -> str:
        """Send the dispatch task with a countdown in seconds."""
        return self._send(job_name, payload, countdown=delay)

    def _send(self, job_name: str, payload: dict[str, Any], **options: Any) -> str:
        result = self.celery_app.send_task(
            self.task_name,
            args=[job_name, payload],
            queue=self.queue,
            **options,
        )
        logger.debug("celery_task_sent", job=job_name, job_id=result.id, queue=self.queue)
        return result.id
