"""Shared FastAPI dependencies."""

from __future__ import annotations

from functools import lru_cache

from dataset_cache.core.config import Settings, get_settings
from dataset_cache.store import DatasetStore

_STORE: DatasetStore | None = None


@lru_cache(maxsize=1)
def get_app_settings() -> Settings:
    return get_settings()


def get_dataset_store() -> DatasetStore:
    global _STORE
    if _STORE is None:
        _STORE = DatasetStore(settings=get_app_settings())
    return _STORE


def shutdown_dataset_store() -> None:
    """Destroy the process-wide store so its sweeper thread exits."""
    global _STORE
    if _STORE is not None:
        _STORE.destroy()
        _STORE = None


__all__ = [
    "get_app_settings",
    "get_dataset_store",
    "shutdown_dataset_store",
]
