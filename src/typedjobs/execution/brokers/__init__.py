"""Broker adapters: where serialized jobs are queued.

Global default broker
─────────────────────
Jobs that do not set their own ``broker`` use the process-wide default.  It
is created lazily as a :class:`CeleryBroker` over the app from
:mod:`typedjobs.execution.tasks`; tests replace it with a
:class:`MemoryBroker` through :func:`set_default_broker`.
"""

from .celery import CeleryBroker
from .memory import MemoryBroker, QueuedJob
from .protocol import Broker

_default_broker: Broker | None = None


def get_default_broker() -> Broker:
    """Get the global default broker, creating a CeleryBroker on first access."""
    global _default_broker
    if _default_broker is None:
        from ..tasks import app

        _default_broker = CeleryBroker(app)
    return _default_broker


def set_default_broker(broker: Broker | None) -> None:
    """Replace the global default broker (None resets to lazy Celery)."""
    global _default_broker
    _default_broker = broker


__all__ = [
    "Broker",
    "CeleryBroker",
    "MemoryBroker",
    "QueuedJob",
    "get_default_broker",
    "set_default_broker",
]
