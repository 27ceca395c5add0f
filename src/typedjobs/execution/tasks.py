"""Celery app and worker task for typedjobs.

Every typed job travels through one Celery task, ``typedjobs.dispatch``,
whose positional arguments are ``(job_name, payload)``.  The task resolves
the job class from the job registry and hands the payload to its pipeline,
which deserializes, coerces and runs it.

Setup::

    # Import the modules that define your jobs, then start a worker:
    celery -A typedjobs.execution.tasks worker --loglevel=info -Q default

Configuration::

    TYPEDJOBS_BROKER_URL      (default: redis://localhost:6379/0)
    TYPEDJOBS_RESULT_BACKEND  (default: redis://localhost:6379/1)
    TYPEDJOBS_DEFAULT_QUEUE   (default: default)
    TYPEDJOBS_LOG_LEVEL       (default: INFO, applied when a worker starts)
    TYPEDJOBS_JSON_LOGS       (default: JSON unless stdout is a tty)

Retries are left to Celery: the task is declared with ``acks_late`` and no
automatic retry, so a failed job is reported as FAILURE with the wrapped
``TypedJobError`` as its result.
"""

from __future__ import annotations

from typing import Any

from celery import Celery, signals

from ..core.logging import LogContext, configure_logging, get_logger
from ..core.settings import TypedJobsSettings, get_settings
from .registry import JobRegistry, get_default_job_registry

logger = get_logger(__name__)


# --------------------------------------------------------------------------- #
# Worker logging
# --------------------------------------------------------------------------- #


@signals.setup_logging.connect
def configure_worker_logging(**kwargs: Any) -> None:
    """Configure structlog for a worker from ``TYPEDJOBS_LOG_LEVEL`` / ``TYPEDJOBS_JSON_LOGS``.

    Connected to Celery's ``setup_logging`` signal, so the worker uses this
    configuration instead of installing its own handlers.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_format=settings.json_logs)
    logger.debug("worker_logging_configured", level=settings.log_level, json=settings.json_logs)


# --------------------------------------------------------------------------- #
# Celery app factory
# --------------------------------------------------------------------------- #


def create_celery_app(settings: TypedJobsSettings | None = None, main: str = "typedjobs") -> Celery:
    """Create a Celery app configured for JSON-only typed job payloads."""
    settings = settings or get_settings()

    celery_app = Celery(
        main,
        broker=settings.broker_url,
        backend=settings.result_backend,
    )
    celery_app.conf.update(
        task_serializer="json",
        accept_content=["json"],
        result_serializer="json",
        timezone="UTC",
        enable_utc=True,
        task_track_started=True,
        task_acks_late=True,
        worker_prefetch_multiplier=1,
        task_default_queue=settings.default_queue,
    )
    return celery_app


# --------------------------------------------------------------------------- #
# Task definitions
# --------------------------------------------------------------------------- #


def register_dispatch_task(
    celery_app: Celery,
    registry: JobRegistry | None = None,
    task_name: str | None = None,
):
    """Define the dispatch task on ``celery_app``.

    Args:
        celery_app: The Celery app workers run
        registry: Job registry to resolve names from (defaults to the global one,
                  looked up at call time)
        task_name: Task name (defaults to settings.dispatch_task_name)

    Returns:
        The Celery task object
    """
    name = task_name or get_settings().dispatch_task_name

    @celery_app.task(name=name, bind=True)
    def dispatch_job(self, job_name: str, payload: dict[str, Any]) -> Any:
        """Run a typed job from its wire payload."""
        with LogContext(job_id=self.request.id):
            logger.info("celery_dispatch", job=job_name)
            job_cls = (registry or get_default_job_registry()).get(job_name)
            return job_cls.dispatch(payload)

    return dispatch_job


app = create_celery_app()
dispatch_job = register_dispatch_task(app)
