"""Recommended base class for job argument schemas.

Any ``pydantic.BaseModel`` subclass is accepted as a job's ``Args``.  Deriving
from ``JobArgs`` instead gives the settings the pipeline is designed around:

- ``extra="forbid"``: unknown keywords are rejected at submission.
- ``frozen=True``: arguments are read-only inside the job body.
- ``coerce_numbers_to_str=True``: a ``str`` field accepts ``42`` from the wire
  as ``"42"``.  Pydantic only applies this in lax mode, so submission (strict)
  still rejects numbers for string fields.

Examples:
    >>> class Args(JobArgs):
    ...     user_id: int
    ...     notify: bool = False
    >>> Args.model_validate({"user_id": "7", "notify": "true"})
    Args(user_id=7, notify=True)
"""

from pydantic import BaseModel, ConfigDict


class JobArgs(BaseModel):
    """Base model for job arguments."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        coerce_numbers_to_str=True,
    )
