"""
typedjobs - typed, validated arguments for background jobs.

Jobs declare their arguments as a pydantic model.  Arguments are validated
strictly when a job is submitted, travel through the broker (Celery) as a
plain JSON payload, and are coerced back into the model when a worker runs
the job.

Quick start::

    from typedjobs import Job, JobArgs, register_job

    @register_job
    class Double(Job):
        class Args(JobArgs):
            value: int

        def run(self):
            return self.value * 2

    Double.run_synchronously(value=5)   # 10
    Double.submit(value=5)              # Celery task id
"""

from .core.errors import (
    ErrorCategory,
    ErrorContext,
    InvalidArgsError,
    JobNotImplementedError,
    SchemaNotDefinedError,
    SerializationError,
    TypedJobError,
    UnknownJobError,
)
from .execution import (
    Broker,
    CeleryBroker,
    Job,
    JobPipeline,
    JobRegistry,
    MemoryBroker,
    get_default_broker,
    get_default_job_registry,
    register_job,
    set_default_broker,
)
from .schema import JobArgs, deserialize, resolve_schema, serialize

__version__ = "0.1.0"

__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "InvalidArgsError",
    "JobNotImplementedError",
    "SchemaNotDefinedError",
    "SerializationError",
    "TypedJobError",
    "UnknownJobError",
    "Broker",
    "CeleryBroker",
    "Job",
    "JobPipeline",
    "JobRegistry",
    "MemoryBroker",
    "get_default_broker",
    "get_default_job_registry",
    "register_job",
    "set_default_broker",
    "JobArgs",
    "deserialize",
    "resolve_schema",
    "serialize",
]
