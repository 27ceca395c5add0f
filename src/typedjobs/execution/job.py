"""Job - the unit-of-work base class.

A job pairs an optional argument schema (the nested ``Args`` model) with a
body (``run``).  The class-level operations (``submit``, ``schedule_at``,
``schedule_in``, ``run_synchronously``, ``dispatch``, ``schema``) all delegate
to a :class:`~typedjobs.execution.pipeline.JobPipeline` built for the class.

Each invocation gets a fresh instance, which is its execution context:

- ``self.args`` is the whole ``Args`` instance (None for argument-less jobs);
- ``self.<field>`` reads one field, via ``__getattr__``;
- ``self.get("<field>")`` reads one field by name.

``__getattr__`` is only consulted when normal attribute lookup fails, so a
method or attribute the job defines always takes precedence over an
argument field with the same name.

Examples:
    >>> @register_job
    ... class Double(Job):
    ...     class Args(JobArgs):
    ...         value: int
    ...
    ...     def run(self):
    ...         return self.value * 2
    >>> Double.run_synchronously(value=5)
    10
    >>> Double.dispatch({"value": "21"})
    42
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel

from ..core.errors import JobNotImplementedError
from .pipeline import JobPipeline

if TYPE_CHECKING:
    from .brokers import Broker


class Job:
    """Base class for typed jobs.

    Class attributes:
        Args: pydantic model describing the job's arguments (optional)
        job_name: Name used for routing, logs and errors (defaults to the
            class's qualified name)
        broker: Broker for this job (defaults to the global default broker)
    """

    Args: ClassVar[type[BaseModel] | None] = None
    job_name: ClassVar[str] = "Job"
    broker: ClassVar[Broker | None] = None

    _args: BaseModel | None = None

    def __init_subclass__(cls, **kwargs: Any):
        super().__init_subclass__(**kwargs)
        if "job_name" not in cls.__dict__:
            cls.job_name = cls.__qualname__

    # ------------------------------------------------------------------ #
    # Execution context
    # ------------------------------------------------------------------ #

    def _bind_args(self, args: BaseModel | None) -> None:
        self._args = args

    @property
    def args(self) -> BaseModel | None:
        """The whole typed argument object, or None."""
        return self._args

    def get(self, field_name: str) -> Any:
        """Read one argument field by name.

        Raises:
            KeyError: If the job has no argument called ``field_name``
        """
        args = self._args
        if args is None or field_name not in type(args).model_fields:
            raise KeyError(f"{self.job_name} has no argument {field_name!r}")
        return getattr(args, field_name)

    def __getattr__(self, name: str) -> Any:
        args = self.__dict__.get("_args")
        if args is not None and name in type(args).model_fields:
            return getattr(args, name)
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def run(self) -> Any:
        """The job body.  Subclasses must override this."""
        raise JobNotImplementedError(
            f"{self.job_name} must implement the run() method"
        ).with_context(job=self.job_name, operation="run")

    # ------------------------------------------------------------------ #
    # Class-level operations
    # ------------------------------------------------------------------ #

    @classmethod
    def pipeline(cls) -> JobPipeline:
        """The argument pipeline for this job class."""
        return JobPipeline(cls)

    @classmethod
    def schema(cls) -> type[BaseModel] | None:
        """The resolved ``Args`` model, or None."""
        return cls.pipeline().schema()

    @classmethod
    def submit(cls, **kwargs: Any) -> str:
        """Queue the job for immediate execution; returns the broker's job id."""
        return cls.pipeline().submit(**kwargs)

    @classmethod
    def schedule_at(cls, when: datetime | int | float, /, **kwargs: Any) -> str:
        """Queue the job to run at ``when``; returns the broker's job id."""
        return cls.pipeline().schedule_at(when, **kwargs)

    @classmethod
    def schedule_in(cls, delay: int | float | timedelta, /, **kwargs: Any) -> str:
        """Queue the job to run after ``delay``; returns the broker's job id."""
        return cls.pipeline().schedule_in(delay, **kwargs)

    @classmethod
    def run_synchronously(cls, **kwargs: Any) -> Any:
        """Run the job now, in this thread, and return its result."""
        return cls.pipeline().run_synchronously(**kwargs)

    @classmethod
    def dispatch(cls, payload: dict[str, Any]) -> Any:
        """Run the job from a wire payload (called by broker workers)."""
        return cls.pipeline().dispatch(payload)
