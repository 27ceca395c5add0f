"""Job Pipeline - validate, serialize, forward; deserialize, bind, run.

Manifesto:
A job declares what it takes (``Args``) and what it does (``run``).  The
pipeline owns everything between the caller's keyword arguments and the
job body, in both directions, so that the job author never sees a raw
payload and the broker never sees a typed object.

ARCHITECTURE
────────────
::

    Submission (caller's process)
    ─────────────────────────────
    submit(**kw) / schedule_at(when, **kw) / schedule_in(delay, **kw)
      │
      ├─ build_arguments(**kw)   strict pydantic validation → Args | None
      │                          ✗ InvalidArgsError / SchemaNotDefinedError
      ├─ serialize(args)         model_dump(mode="json") + str keys
      │                          ✗ SerializationError
      └─ broker.submit / schedule_at / schedule_in   → job id (unchanged)

    run_synchronously(**kw)
      └─ build_arguments → bind to a new job → run()   (no wire round-trip)

    Dispatch (broker worker)
    ────────────────────────
    dispatch(payload)
      Received → Deserializing ──✗ SerializationError (never wrapped)
                     │
                   Ready → Executing ──✓ result
                                     ├─✗ TypedJobError   (passes through)
                                     └─✗ anything else → TypedJobError
                                         "Error in <job>#run: <msg>\\n<traceback>"

There is no retry or recovery anywhere in this module; every failure is
terminal for the invocation and retrying is the broker's decision.

Related modules:
    job.py             - Job base class; instances are execution contexts
    ../schema/adapter  - serialize / deserialize
    ../schema/registry - schema resolution and caching
    brokers/           - Broker protocol and implementations

Tags:
    typedjobs, execution, pipeline, validation, dispatch

Doc-Types:
    api-reference
"""

from __future__ import annotations

import traceback
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ValidationError

from ..core.errors import InvalidArgsError, SerializationError, TypedJobError, is_passthrough
from ..core.logging import LogContext, get_logger
from ..core.settings import get_settings
from ..schema.adapter import WirePayload, deserialize, serialize
from ..schema.fields import unknown_keys
from ..schema.registry import SchemaRegistry, get_default_schema_registry, job_display_name
from .brokers import Broker, get_default_broker

if TYPE_CHECKING:
    from .job import Job

logger = get_logger(__name__)

RUN_METHOD = "run"


class JobPipeline:
    """The argument pipeline for one job class.

    Example:
        >>> pipeline = JobPipeline(SendEmail, broker=MemoryBroker())
        >>> pipeline.submit(user_id=7)
        'mem-1a2b3c4d'
        >>> pipeline.run_synchronously(user_id=7)
        'sent to 7'
    """

    def __init__(
        self,
        job_cls: type[Job],
        *,
        broker: Broker | None = None,
        schema_registry: SchemaRegistry | None = None,
    ):
        """Initialize for a job class.

        Args:
            job_cls: The job class whose arguments this pipeline handles
            broker: Broker to forward to (defaults to ``job_cls.broker``,
                    then the global default broker)
            schema_registry: Schema cache (defaults to the global one)
        """
        self.job_cls = job_cls
        self._broker = broker
        self._schema_registry = schema_registry

    @property
    def name(self) -> str:
        """The job's name, as used in payload routing, logs and error messages."""
        return job_display_name(self.job_cls)

    @property
    def broker(self) -> Broker:
        return self._broker or getattr(self.job_cls, "broker", None) or get_default_broker()

    def schema(self) -> type[BaseModel] | None:
        """The job's resolved ``Args`` model, or None if it takes no arguments."""
        registry = self._schema_registry or get_default_schema_registry()
        return registry.resolve(self.job_cls)

    # ------------------------------------------------------------------ #
    # Submission
    # ------------------------------------------------------------------ #

    def build_arguments(self, **raw_kwargs: Any) -> BaseModel | None:
        """Strictly validate keyword arguments into the job's ``Args`` model.

        Keys no field accepts are rejected, whatever the model config.
        Jobs without ``Args`` accept (and ignore) any keywords.  With no
        keywords, every field must have a default.

        Raises:
            SchemaNotDefinedError: If ``Args`` is not a pydantic model
            InvalidArgsError: On unknown keys, missing fields or wrong types
        """
        schema = self.schema()
        if schema is None:
            if raw_kwargs:
                logger.debug("job_args_ignored", job=self.name, keys=sorted(raw_kwargs))
            return None

        unexpected = unknown_keys(schema, raw_kwargs)
        if unexpected:
            logger.warning("job_args_invalid", job=self.name, unknown=unexpected)
            raise InvalidArgsError(
                f"Invalid arguments for {self.name}: unknown arguments {', '.join(unexpected)}"
            ).with_context(job=self.name, operation="build_arguments")

        try:
            return schema.model_validate(raw_kwargs, strict=True)
        except (ValidationError, TypeError, ValueError) as exc:
            logger.warning("job_args_invalid", job=self.name, error=str(exc))
            raise InvalidArgsError(
                f"Invalid arguments for {self.name}: {exc}", cause=exc
            ).with_context(job=self.name, operation="build_arguments") from exc

    def serialize(self, args: BaseModel | None) -> WirePayload:
        """Serialize built arguments into a wire payload."""
        return serialize(self.name, args)

    def submit(self, **kwargs: Any) -> str:
        """Validate, serialize and queue the job for immediate execution.

        Returns:
            The broker's job id
        """
        payload = self.serialize(self.build_arguments(**kwargs))
        broker = self.broker
        job_id = broker.submit(self.name, payload)
        logger.debug("job_submitted", job=self.name, job_id=job_id, broker=broker_name(broker))
        return job_id

    def schedule_at(self, when: datetime | int | float, /, **kwargs: Any) -> str:
        """Validate, serialize and queue the job to run at ``when``.

        ``when`` is a datetime (naive values are taken as UTC) or a POSIX
        timestamp.
        """
        payload = self.serialize(self.build_arguments(**kwargs))
        at = normalize_when(when)
        broker = self.broker
        job_id = broker.schedule_at(self.name, at, payload)
        logger.debug(
            "job_scheduled", job=self.name, job_id=job_id, broker=broker_name(broker), at=at.isoformat()
        )
        return job_id

    def schedule_in(self, delay: int | float | timedelta, /, **kwargs: Any) -> str:
        """Validate, serialize and queue the job to run after ``delay`` (seconds or timedelta)."""
        payload = self.serialize(self.build_arguments(**kwargs))
        seconds = normalize_delay(delay)
        broker = self.broker
        job_id = broker.schedule_in(self.name, seconds, payload)
        logger.debug(
            "job_scheduled", job=self.name, job_id=job_id, broker=broker_name(broker), delay=seconds
        )
        return job_id

    def run_synchronously(self, **kwargs: Any) -> Any:
        """Validate the arguments and run the job now, in this thread.

        The built arguments are bound directly; nothing is serialized.
        """
        return self._execute(self.build_arguments(**kwargs))

    # ------------------------------------------------------------------ #
    # Dispatch
    # ------------------------------------------------------------------ #

    def dispatch(self, payload: WirePayload) -> Any:
        """Run a previously submitted job from its wire payload.

        Called by the broker's worker with the exact payload that was
        submitted.

        Raises:
            SerializationError: If the payload cannot be coerced into ``Args``
            TypedJobError: If ``run()`` failed (original exception chained)
        """
        with LogContext(job=self.name):
            logger.debug("job_dispatched")
            try:
                args = deserialize(self.name, self.schema(), payload)
            except SerializationError as exc:
                logger.error("job_deserialization_failed", error=exc.message)
                raise
            return self._execute(args)

    # ------------------------------------------------------------------ #
    # Execution
    # ------------------------------------------------------------------ #

    def _execute(self, args: BaseModel | None) -> Any:
        job = self.job_cls()
        job._bind_args(args)

        try:
            result = job.run()
        except Exception as exc:
            if is_passthrough(exc):
                raise
            logger.error("job_failed", job=self.name, error=str(exc), error_type=type(exc).__name__)
            raise self._wrap(exc) from exc

        logger.debug("job_completed", job=self.name)
        return result

    def _wrap(self, exc: Exception) -> TypedJobError:
        message = f"Error in {self.name}#{RUN_METHOD}: {exc}"
        if get_settings().include_traceback and exc.__traceback__ is not None:
            trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
            message = f"{message}\n{trace}"
        return TypedJobError(message, cause=exc).with_context(job=self.name, operation=RUN_METHOD)


# =============================================================================
# BROKER AND SCHEDULING HELPERS
# =============================================================================


def broker_name(broker: Broker) -> str:
    """Name a broker for logs: its ``name`` attribute, else its class name."""
    return getattr(broker, "name", None) or type(broker).__name__


def normalize_when(when: datetime | int | float) -> datetime:
    """Normalize a schedule time into a timezone-aware datetime."""
    if isinstance(when, datetime):
        return when if when.tzinfo is not None else when.replace(tzinfo=timezone.utc)
    if isinstance(when, (int, float)) and not isinstance(when, bool):
        return datetime.fromtimestamp(when, tz=timezone.utc)
    raise TypeError(f"when must be a datetime or a POSIX timestamp, got {type(when).__name__}")


def normalize_delay(delay: int | float | timedelta) -> float:
    """Normalize a schedule delay into seconds."""
    if isinstance(delay, timedelta):
        return delay.total_seconds()
    if isinstance(delay, (int, float)) and not isinstance(delay, bool):
        return float(delay)
    raise TypeError(f"delay must be a number of seconds or a timedelta, got {type(delay).__name__}")
