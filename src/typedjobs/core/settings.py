"""Settings for typedjobs.

Configuration is environment-driven (``TYPEDJOBS_`` prefix, optional ``.env``
file) and validated by pydantic-settings at first access.

Manifesto:
    - **Pydantic validation:** Type-checked at startup, not at dispatch time
    - **Environment-driven:** Workers and submitters read the same variables
    - **Sensible defaults:** A local Redis broker works out of the box

Examples:
    >>> import os
    >>> os.environ["TYPEDJOBS_DEFAULT_QUEUE"] = "mail"
    >>> reset_settings()
    >>> get_settings().default_queue
    'mail'

Tags:
    settings, configuration, pydantic, environment, typedjobs

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TypedJobsSettings(BaseSettings):
    """Settings shared by job submitters and broker workers.

    Fields
    ──────
    broker_url         : Celery broker URL
    result_backend     : Celery result backend URL (None disables results)
    dispatch_task_name : Name of the Celery task that dispatches payloads
    default_queue      : Queue used when a job does not name one
    log_level          : structlog log level
    json_logs          : Force JSON (True) or console (False) logs; None = auto
    include_traceback  : Embed the formatted traceback in wrapped job errors
    """

    model_config = SettingsConfigDict(
        env_prefix="TYPEDJOBS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Broker ───────────────────────────────────────────────────
    broker_url: str = "redis://localhost:6379/0"
    result_backend: str | None = "redis://localhost:6379/1"
    dispatch_task_name: str = "typedjobs.dispatch"
    default_queue: str = Field(default="default", min_length=1)

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    json_logs: bool | None = None

    # ── Errors ───────────────────────────────────────────────────
    include_traceback: bool = True


_settings: TypedJobsSettings | None = None


def get_settings() -> TypedJobsSettings:
    """Get the process-wide settings, loading them on first access."""
    global _settings
    if _settings is None:
        _settings = TypedJobsSettings()
    return _settings


def reset_settings() -> None:
    """Drop cached settings so the next access re-reads the environment (for testing)."""
    global _settings
    _settings = None


__all__ = ["TypedJobsSettings", "get_settings", "reset_settings"]
