"""
Shared pytest fixtures and configuration for typedjobs tests.

This module provides:
- Global state cleanup (schema cache, default broker, settings) for test isolation
- An in-memory broker wired to the fixture job registry
- A mock Celery app for broker tests

Usage:
    Fixtures are auto-discovered by pytest; request them as arguments.

    def test_something(broker):
        Double.submit(value=1)
        assert broker.drain() == [2]
"""

from collections.abc import Generator
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from typedjobs.core.settings import reset_settings
from typedjobs.execution import MemoryBroker, reset_default_job_registry, set_default_broker
from typedjobs.schema import reset_default_schema_registry

from tests._support import jobs


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)

        if "integration" in str(test_path):
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Global State Cleanup Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_global_state() -> Generator[None, None, None]:
    """
    Reset every process-wide singleton before and after each test.

    Schema cache, default job registry, default broker and settings are all
    lazily created module globals; no test may see another test's leftovers.
    """
    reset_default_schema_registry()
    reset_default_job_registry()
    set_default_broker(None)
    reset_settings()
    yield
    reset_default_schema_registry()
    reset_default_job_registry()
    set_default_broker(None)
    reset_settings()


@pytest.fixture(autouse=True)
def broker(clean_global_state) -> MemoryBroker:
    """
    In-memory default broker resolving names from the fixture job registry.

    Autouse so that no test ever reaches for a real Celery connection.
    """
    memory_broker = MemoryBroker(registry=jobs.registry)
    set_default_broker(memory_broker)
    return memory_broker


# =============================================================================
# Celery Fixtures
# =============================================================================


@pytest.fixture
def mock_celery_app() -> MagicMock:
    """Mock Celery app whose send_task returns an AsyncResult-like object."""
    app = MagicMock()
    app.send_task.return_value = MagicMock(id="celery-task-id-123")
    return app
