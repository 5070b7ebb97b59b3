"""Internal dataclasses representing cached entities."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from dataset_cache.models.dto import DatasetKind, DatasetMetadata

Record = dict[str, Any]


@dataclass(slots=True, frozen=True)
class Snapshot:
    id: str
    kind: DatasetKind
    scope_id: str | None
    scope_name: str | None
    created_at: datetime
    expires_at: datetime
    identity_field: str
    fallback_field: str
    items: tuple[Record, ...]
    metadata: DatasetMetadata

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


__all__ = ["Record", "Snapshot"]
