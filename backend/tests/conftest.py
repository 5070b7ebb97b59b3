"""Test fixtures for the dataset cache."""

from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))


class FakeClock:
    """Manually advanced UTC clock injected into DatasetStore."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, milliseconds: float) -> None:
        self.now += timedelta(milliseconds=milliseconds)


@pytest.fixture(autouse=True)
def reset_state(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset global singletons and environment between tests."""
    monkeypatch.delenv("DSC_CONFIG", raising=False)
    monkeypatch.delenv("DSC_HOST", raising=False)

    from dataset_cache.api import dependencies as deps
    from dataset_cache.core.config import get_settings

    get_settings.cache_clear()
    deps.get_app_settings.cache_clear()
    deps.shutdown_dataset_store()
    yield
    deps.shutdown_dataset_store()
    deps.get_app_settings.cache_clear()
    get_settings.cache_clear()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock):
    from dataset_cache.core.config import Settings
    from dataset_cache.store import DatasetStore

    dataset_store = DatasetStore(settings=Settings(), clock=clock, start_sweeper=False)
    yield dataset_store
    dataset_store.destroy()


@pytest.fixture(scope="session")
def event_items() -> list[dict]:
    return [
        {"id": 1, "level": "ERROR", "outcome": "FAILED", "name": "Deploy", "dateTime": 1714564800000},
        {"id": 2, "level": "INFO", "outcome": "SUCCESS", "name": "Login", "dateTime": 1714568400000},
    ]
