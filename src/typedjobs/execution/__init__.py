"""Execution layer: jobs, their pipeline, the job registry and brokers.

Typical use::

    from typedjobs import Job, JobArgs, register_job

    @register_job
    class SendReceipt(Job):
        class Args(JobArgs):
            order_id: int
            resend: bool = False

        def run(self):
            return mailer.send_receipt(self.order_id, force=self.resend)

    SendReceipt.submit(order_id=1234)                 # queued via the broker
    SendReceipt.schedule_in(300, order_id=1234)       # in five minutes
    SendReceipt.run_synchronously(order_id=1234)      # right here, right now
"""

from .brokers import (
    Broker,
    CeleryBroker,
    MemoryBroker,
    QueuedJob,
    get_default_broker,
    set_default_broker,
)
from .job import Job
from .pipeline import JobPipeline, normalize_delay, normalize_when
from .registry import (
    JobRegistry,
    get_default_job_registry,
    register_job,
    reset_default_job_registry,
)

__all__ = [
    "Broker",
    "CeleryBroker",
    "MemoryBroker",
    "QueuedJob",
    "get_default_broker",
    "set_default_broker",
    "Job",
    "JobPipeline",
    "normalize_delay",
    "normalize_when",
    "JobRegistry",
    "get_default_job_registry",
    "register_job",
    "reset_default_job_registry",
]
