"""Summary generation for stored datasets."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Mapping, Sequence

from dataset_cache.models.dto import DatasetKind, DatasetSummary, DateRange
from dataset_cache.models.entities import Record
from dataset_cache.store.identity import is_number
from dataset_cache.utils.text import decimal_text, truncate
from dataset_cache.utils.time import from_epoch_ms, iso_ms, to_epoch_ms

DATE_FIELDS = ("receivedDate", "dateTime", "dateCreated")
UNKNOWN = "UNKNOWN"
ERROR_STATUS = "ERROR"
GENERIC_PREVIEW_FIELDS = 5


def build_summary(
    kind: DatasetKind,
    items: Sequence[Record],
    preview_size: int = 5,
    text_limit: int = 100,
) -> DatasetSummary:
    """Aggregate counts, date range and a compact preview for ``items``."""
    summary = DatasetSummary(
        total_count=len(items),
        preview=[project_item(kind, item, text_limit) for item in items[:preview_size]],
    )
    if not items:
        return summary

    summary.date_range = date_range(items)

    if kind is DatasetKind.MESSAGES:
        summary.status_counts = count_by_field(items, "status")
        summary.error_count = sum(1 for item in items if _has_error(item))
    elif kind in (DatasetKind.LOG_ENTRIES, DatasetKind.CONNECTION_LOGS):
        summary.level_counts = count_by_field(items, "level")
    elif kind is DatasetKind.EVENTS:
        summary.level_counts = count_by_field(items, "level")
        summary.outcome_counts = count_by_field(items, "outcome")
    return summary


def count_by_field(items: Iterable[Record], field: str) -> dict[str, int]:
    counts: dict[str, int] = {}
    for item in items:
        label = tally_label(item.get(field))
        counts[label] = counts.get(label, 0) + 1
    return counts


def tally_label(value: Any) -> str:
    if value is None or value == "":
        return UNKNOWN
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        return decimal_text(value)
    return str(value)


# Date range ----------------------------------------------------------------


def date_range(items: Iterable[Record]) -> DateRange | None:
    stamps: list[float] = []
    for item in items:
        raw = _first_date_value(item)
        if raw is None:
            continue
        parsed = parse_timestamp(raw)
        if parsed is not None:
            stamps.append(parsed)
    if not stamps:
        return None
    return DateRange(
        earliest=iso_ms(from_epoch_ms(min(stamps))),
        latest=iso_ms(from_epoch_ms(max(stamps))),
    )


def parse_timestamp(value: Any) -> float | None:
    """Epoch milliseconds for a number, ``{"time": ms}`` object or ISO date string."""
    if is_number(value):
        return _representable(value)
    if isinstance(value, Mapping):
        embedded = value.get("time")
        return _representable(embedded) if is_number(embedded) else None
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return to_epoch_ms(parsed)
    return None


def _representable(value: Any) -> float | None:
    try:
        millis = float(value)
        from_epoch_ms(millis)
    except (OverflowError, OSError, ValueError):
        return None
    return millis


def _first_date_value(item: Record) -> Any:
    for field in DATE_FIELDS:
        value = item.get(field)
        if value not in (None, ""):
            return value
    return None


# Message statuses ----------------------------------------------------------


def connector_statuses(message: Record) -> list[Any] | None:
    """Per-connector statuses of a message, or ``None`` when it carries none.

    Handles both the flat ``connectorMessages: [...]`` list and the nested
    ``connectorMessages: {"entry": {"connectorMessage": {...}}}`` form, where
    ``entry`` may itself be a list of such objects.
    """
    connectors = message.get("connectorMessages")
    if isinstance(connectors, list):
        return [c.get("status") for c in connectors if isinstance(c, Mapping)]
    if not isinstance(connectors, Mapping):
        return None
    entries = connectors.get("entry")
    if isinstance(entries, Mapping):
        entries = [entries]
    if not isinstance(entries, list):
        return None
    statuses = []
    for entry in entries:
        connector = entry.get("connectorMessage") if isinstance(entry, Mapping) else None
        if isinstance(connector, Mapping):
            statuses.append(connector.get("status"))
    return statuses


def message_status(message: Record) -> str:
    statuses = connector_statuses(message)
    if statuses:
        return statuses[0] or UNKNOWN
    return UNKNOWN


def _has_error(message: Record) -> bool:
    statuses = connector_statuses(message)
    if statuses is not None:
        return ERROR_STATUS in statuses
    return message.get("status") == ERROR_STATUS


# Preview projection --------------------------------------------------------


def _project_message(item: Record, _limit: int) -> Record:
    return {
        "messageId": item.get("messageId"),
        "receivedDate": item.get("receivedDate"),
        "processed": item.get("processed"),
        "status": message_status(item),
    }


def _project_log_entry(item: Record, limit: int) -> Record:
    return {
        "id": item.get("id"),
        "level": item.get("level"),
        "dateCreated": item.get("dateCreated"),
        "logMessage": truncate(item.get("logMessage"), limit),
    }


def _project_connection_log(item: Record, limit: int) -> Record:
    return {
        "id": item.get("id"),
        "channelName": item.get("channelName"),
        "eventState": item.get("eventState"),
        "dateCreated": item.get("dateCreated"),
        "information": truncate(item.get("information"), limit),
    }


def _project_event(item: Record, _limit: int) -> Record:
    return {
        "id": item.get("id"),
        "level": item.get("level"),
        "name": item.get("name"),
        "outcome": item.get("outcome"),
        "dateTime": item.get("dateTime"),
    }


def _project_generic(item: Record, _limit: int) -> Record:
    return {key: item[key] for key in list(item)[:GENERIC_PREVIEW_FIELDS]}


_PROJECTIONS: dict[DatasetKind, Callable[[Record, int], Record]] = {
    DatasetKind.MESSAGES: _project_message,
    DatasetKind.LOG_ENTRIES: _project_log_entry,
    DatasetKind.CONNECTION_LOGS: _project_connection_log,
    DatasetKind.EVENTS: _project_event,
}


def project_item(kind: DatasetKind, item: Record, text_limit: int = 100) -> Record:
    """Compact, kind-specific view of a record used in previews."""
    projection = _PROJECTIONS.get(kind, _project_generic)
    return projection(item, text_limit)


__all__ = [
    "build_summary",
    "count_by_field",
    "date_range",
    "parse_timestamp",
    "connector_statuses",
    "message_status",
    "project_item",
    "UNKNOWN",
]
