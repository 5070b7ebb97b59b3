"""Time-bounded in-memory store for large paginated result sets.

A producer fetches data once and hands it to :meth:`DatasetStore.store`, which
returns a summary plus an opaque dataset id. Callers then narrow the snapshot
with :meth:`DatasetStore.query` and :meth:`DatasetStore.get_by_id` instead of
re-fetching from the origin. Snapshots expire after a TTL (30 minutes by
default) and are evicted lazily on access, by :meth:`DatasetStore.sweep`, and
by the background :class:`ExpirySweeper`.
"""

from __future__ import annotations

import math
import threading
import time
from functools import partial
from typing import Any, Sequence

from dataset_cache.core.config import Settings, get_settings
from dataset_cache.core.errors import DatasetExpiredError, DatasetNotFoundError
from dataset_cache.core.logging import get_logger
from dataset_cache.core.metrics import (
    DATASETS_EVICTED,
    DATASETS_STORED,
    ITEMS_INGESTED,
    LIVE_DATASETS,
    QUERY_COUNT,
    QUERY_LATENCY,
)
from dataset_cache.models.dto import DatasetKind, DatasetMetadata, DatasetPage, DatasetQuery
from dataset_cache.models.entities import Record, Snapshot
from dataset_cache.store.identity import order_key, resolve_identity, values_equal
from dataset_cache.store.normalize import normalize_items
from dataset_cache.store.query import (
    clamp_page_size,
    filter_by_fields,
    filter_by_ids,
    paginate,
    search_items,
    sort_items,
)
from dataset_cache.store.summary import build_summary
from dataset_cache.store.sweeper import ExpirySweeper
from dataset_cache.utils.ids import new_dataset_id
from dataset_cache.utils.time import Clock, add_ms, utc_now

logger = get_logger(__name__)


class DatasetStore:
    """Owns every live snapshot; the only component allowed to touch the map."""

    def __init__(
        self,
        settings: Settings | None = None,
        clock: Clock = utc_now,
        start_sweeper: bool = True,
    ) -> None:
        self.settings = settings or get_settings()
        self._clock = clock
        self._datasets: dict[str, Snapshot] = {}
        self._lock = threading.RLock()
        self._sweeper: ExpirySweeper | None = None
        if start_sweeper and self.settings.sweep_interval_seconds > 0:
            self._sweeper = ExpirySweeper(self.sweep, self.settings.sweep_interval_seconds)
            self._sweeper.start()

    def __enter__(self) -> "DatasetStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.destroy()

    def __len__(self) -> int:
        with self._lock:
            return len(self._datasets)

    # Ingestion --------------------------------------------------------

    def store(
        self,
        kind: DatasetKind | str,
        raw_items: Sequence[Any] | None,
        *,
        scope_id: str | None = None,
        scope_name: str | None = None,
        ttl_ms: float | None = None,
        identity_field: str | None = None,
    ) -> DatasetMetadata:
        """Normalize ``raw_items``, summarize them and register a new snapshot."""
        kind = DatasetKind(kind)
        primary = identity_field or self.settings.identity_field
        fallback = self.settings.identity_fallback_field
        identity = partial(resolve_identity, primary=primary, fallback=fallback)

        records = normalize_items(raw_items)
        records.sort(key=lambda item: order_key(identity(item)), reverse=True)
        summary = build_summary(
            kind,
            records,
            preview_size=self.settings.preview_size,
            text_limit=self.settings.preview_text_limit,
        )

        dataset_id = new_dataset_id()
        created_at = self._clock()
        expires_at = add_ms(created_at, ttl_ms or self.settings.default_ttl_ms)
        page_size = self.settings.default_page_size
        metadata = DatasetMetadata(
            id=dataset_id,
            kind=kind,
            scope_id=scope_id,
            scope_name=scope_name,
            created_at=created_at,
            expires_at=expires_at,
            total_count=len(records),
            page_size=page_size,
            total_pages=math.ceil(len(records) / page_size),
            summary=summary,
        )
        snapshot = Snapshot(
            id=dataset_id,
            kind=kind,
            scope_id=scope_id,
            scope_name=scope_name,
            created_at=created_at,
            expires_at=expires_at,
            identity_field=primary,
            fallback_field=fallback,
            items=tuple(records),
            metadata=metadata,
        )
        with self._lock:
            self._datasets[dataset_id] = snapshot
            LIVE_DATASETS.set(len(self._datasets))
        DATASETS_STORED.labels(kind=kind.value).inc()
        ITEMS_INGESTED.labels(kind=kind.value).inc(len(records))
        logger.info(
            "Stored dataset %s (%s, %s items)",
            dataset_id,
            kind.value,
            len(records),
            extra={"ctx_dataset_id": dataset_id, "ctx_kind": kind.value, "ctx_items": len(records)},
        )
        return metadata

    # Reads ------------------------------------------------------------

    def query(self, request: DatasetQuery) -> DatasetPage:
        """Filter, search, sort and paginate a live snapshot."""
        start_time = time.perf_counter()
        with self._lock:
            try:
                snapshot = self._require_live(request.dataset_id)
            except DatasetNotFoundError:
                QUERY_COUNT.labels(outcome="not_found").inc()
                raise

            working: list[Record] = list(snapshot.items)
            if request.ids:
                working = filter_by_ids(working, request.ids, partial(_snapshot_identity, snapshot))
            if request.filters:
                working = filter_by_fields(working, request.filters)
            if request.search:
                working = search_items(working, request.search)
            if request.sort_by:
                working = sort_items(working, request.sort_by, descending=request.sort_order != "asc")

            page_size = clamp_page_size(
                request.page_size,
                default=self.settings.default_page_size,
                maximum=self.settings.max_page_size,
            )
            window = paginate(working, request.page, page_size)

        QUERY_LATENCY.observe(time.perf_counter() - start_time)
        QUERY_COUNT.labels(outcome="ok").inc()
        return DatasetPage(
            dataset_id=snapshot.id,
            page=window.page,
            page_size=window.page_size,
            total_pages=window.total_pages,
            total_count=window.total_count,
            has_next=window.has_next,
            has_prev=window.has_prev,
            items=window.items,
        )

    def get_by_id(self, dataset_id: str, item_id: Any) -> Record | None:
        """Full record whose identity equals ``item_id``; first match wins."""
        with self._lock:
            snapshot = self._require_live(dataset_id)
            for item in snapshot.items:
                if values_equal(_snapshot_identity(snapshot, item), item_id):
                    return item
            return None

    def get_metadata(self, dataset_id: str) -> DatasetMetadata | None:
        try:
            return self._require_live(dataset_id).metadata
        except DatasetNotFoundError:
            return None

    def list_datasets(self) -> list[DatasetMetadata]:
        with self._lock:
            self.sweep()
            return [snapshot.metadata for snapshot in self._datasets.values()]

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {
                "datasets": len(self._datasets),
                "items": sum(len(snapshot.items) for snapshot in self._datasets.values()),
            }

    # Lifecycle --------------------------------------------------------

    def delete(self, dataset_id: str) -> bool:
        with self._lock:
            removed = self._datasets.pop(dataset_id, None) is not None
            LIVE_DATASETS.set(len(self._datasets))
        if removed:
            DATASETS_EVICTED.labels(reason="deleted").inc()
            logger.info("Deleted dataset %s", dataset_id, extra={"ctx_dataset_id": dataset_id})
        return removed

    def sweep(self) -> int:
        """Remove every expired snapshot; returns how many were evicted."""
        now = self._clock()
        with self._lock:
            expired = [key for key, snapshot in self._datasets.items() if snapshot.is_expired(now)]
            for key in expired:
                del self._datasets[key]
            LIVE_DATASETS.set(len(self._datasets))
        if expired:
            DATASETS_EVICTED.labels(reason="expired").inc(len(expired))
            logger.debug("Swept %s expired datasets", len(expired))
        return len(expired)

    def destroy(self) -> None:
        """Stop the background sweeper and drop every snapshot."""
        if self._sweeper is not None:
            self._sweeper.stop()
            self._sweeper = None
        with self._lock:
            dropped = len(self._datasets)
            self._datasets.clear()
            LIVE_DATASETS.set(0)
        if dropped:
            DATASETS_EVICTED.labels(reason="shutdown").inc(dropped)
        logger.info("Dataset store destroyed", extra={"ctx_dropped": dropped})

    # Internal helpers -------------------------------------------------

    def _require_live(self, dataset_id: str) -> Snapshot:
        with self._lock:
            snapshot = self._datasets.get(dataset_id)
            if snapshot is None:
                raise DatasetNotFoundError(dataset_id)
            if snapshot.is_expired(self._clock()):
                del self._datasets[dataset_id]
                LIVE_DATASETS.set(len(self._datasets))
                DATASETS_EVICTED.labels(reason="expired").inc()
                raise DatasetExpiredError(dataset_id)
            return snapshot


def _snapshot_identity(snapshot: Snapshot, item: Record) -> Any:
    return resolve_identity(item, snapshot.identity_field, snapshot.fallback_field)


__all__ = ["DatasetStore"]
