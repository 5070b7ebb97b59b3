"""Errors raised by the dataset store."""

from __future__ import annotations

from typing import Any


class DatasetNotFoundError(LookupError):
    """Dataset id is unknown or its snapshot is no longer live."""

    def __init__(self, dataset_id: str, message: str | None = None) -> None:
        self.dataset_id = dataset_id
        super().__init__(message or f"Dataset not found: {dataset_id}. It may have expired.")


class DatasetExpiredError(DatasetNotFoundError):
    """Dataset existed but is past its expiry time."""

    def __init__(self, dataset_id: str) -> None:
        super().__init__(dataset_id, f"Dataset expired: {dataset_id}")


class ItemNotFoundError(LookupError):
    """No item with the requested identity exists in a live dataset."""

    def __init__(self, dataset_id: str, item_id: Any) -> None:
        self.dataset_id = dataset_id
        self.item_id = item_id
        super().__init__(f"Item {item_id!r} not found in dataset {dataset_id}")


__all__ = ["DatasetNotFoundError", "DatasetExpiredError", "ItemNotFoundError"]
