"""Pydantic DTOs exposed via the store and the API."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field

ItemId = int | float | str


class DatasetKind(str, Enum):
    """Semantic category of a dataset; selects summary and preview rules."""

    MESSAGES = "messages"
    LOG_ENTRIES = "log-entries"
    CONNECTION_LOGS = "connection-logs"
    EVENTS = "events"
    CHANNELS = "channels"
    GENERIC = "generic"


class DateRange(BaseModel):
    earliest: str
    latest: str


class DatasetSummary(BaseModel):
    total_count: int
    date_range: DateRange | None = None
    status_counts: dict[str, int] | None = None
    error_count: int | None = None
    level_counts: dict[str, int] | None = None
    outcome_counts: dict[str, int] | None = None
    preview: list[dict[str, Any]] = Field(default_factory=list)


class DatasetMetadata(BaseModel):
    id: str
    kind: DatasetKind
    scope_id: str | None = None
    scope_name: str | None = None
    created_at: datetime
    expires_at: datetime
    total_count: int
    page_size: int
    total_pages: int
    summary: DatasetSummary


class QueryRequest(BaseModel):
    """Query options for a single dataset."""

    ids: list[ItemId] | None = Field(default=None, description="Only items with these identities")
    filters: dict[str, Any] | None = Field(default=None, description="Field name to expected value")
    search: str | None = Field(default=None, description="Case-insensitive text search across fields")
    sort_by: str | None = None
    sort_order: Literal["asc", "desc"] = "desc"
    page: int | None = Field(default=None, description="1-based page number")
    page_size: int | None = None


class DatasetQuery(QueryRequest):
    dataset_id: str


class DatasetPage(BaseModel):
    dataset_id: str
    page: int
    page_size: int
    total_pages: int
    total_count: int
    has_next: bool
    has_prev: bool
    items: list[dict[str, Any]]


class StoreRequest(BaseModel):
    kind: DatasetKind = DatasetKind.GENERIC
    items: list[Any] = Field(default_factory=list, description="Raw payload as returned upstream")
    scope_id: str | None = None
    scope_name: str | None = None
    ttl_ms: int | None = Field(default=None, ge=0, description="Time to live; default when omitted")
    identity_field: str | None = None


class DeleteResponse(BaseModel):
    status: Literal["ok", "noop"]
    deleted: int


class StatsResponse(BaseModel):
    datasets: int
    items: int


__all__ = [
    "ItemId",
    "DatasetKind",
    "DateRange",
    "DatasetSummary",
    "DatasetMetadata",
    "QueryRequest",
    "DatasetQuery",
    "DatasetPage",
    "StoreRequest",
    "DeleteResponse",
    "StatsResponse",
]
