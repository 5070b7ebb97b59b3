"""Tests for summary generation."""

from dataset_cache.models.dto import DatasetKind
from dataset_cache.store.summary import (
    UNKNOWN,
    build_summary,
    connector_statuses,
    parse_timestamp,
    project_item,
)


def test_event_summary_counts(event_items: list[dict]) -> None:
    summary = build_summary(DatasetKind.EVENTS, event_items)
    assert summary.total_count == 2
    assert summary.level_counts == {"ERROR": 1, "INFO": 1}
    assert summary.outcome_counts == {"FAILED": 1, "SUCCESS": 1}
    assert summary.status_counts is None
    assert summary.preview[0] == {
        "id": 1,
        "level": "ERROR",
        "name": "Deploy",
        "outcome": "FAILED",
        "dateTime": 1714564800000,
    }


def test_date_range_mixes_formats_and_skips_garbage() -> None:
    items = [
        {"receivedDate": {"time": 1714564800000, "timezone": "UTC"}},
        {"dateTime": "2024-05-02T08:30:00Z"},
        {"dateCreated": 1714478400000},
        {"dateCreated": "yesterday-ish"},
        {"dateCreated": True},
        {"name": "no date"},
    ]
    summary = build_summary(DatasetKind.GENERIC, items)
    assert summary.date_range is not None
    assert summary.date_range.earliest == "2024-04-30T12:00:00.000Z"
    assert summary.date_range.latest == "2024-05-02T08:30:00.000Z"


def test_date_range_absent_when_nothing_parses() -> None:
    summary = build_summary(DatasetKind.GENERIC, [{"dateTime": "n/a"}])
    assert summary.date_range is None


def test_parse_timestamp_variants() -> None:
    assert parse_timestamp(1000) == 1000.0
    assert parse_timestamp({"time": 2000}) == 2000.0
    assert parse_timestamp({"time": "soon"}) is None
    assert parse_timestamp("1970-01-01T00:00:01") == 1000.0
    assert parse_timestamp(10**30) is None
    assert parse_timestamp(["2024"]) is None


def test_message_summary_errors_and_statuses() -> None:
    items = [
        {"messageId": 3, "status": "SENT", "connectorMessages": [{"status": "SENT"}, {"status": "ERROR"}]},
        {"messageId": 2, "status": "ERROR"},
        {"messageId": 1, "connectorMessages": {"entry": {"connectorMessage": {"status": "FILTERED"}}}},
    ]
    summary = build_summary(DatasetKind.MESSAGES, items)
    assert summary.error_count == 2
    assert summary.status_counts == {"SENT": 1, "ERROR": 1, UNKNOWN: 1}
    assert [row["status"] for row in summary.preview] == ["SENT", UNKNOWN, "FILTERED"]


def test_connector_statuses_nested_entry_list() -> None:
    message = {
        "connectorMessages": {
            "entry": [
                {"connectorMessage": {"status": "RECEIVED"}},
                {"connectorMessage": {"status": "ERROR"}},
            ]
        }
    }
    assert connector_statuses(message) == ["RECEIVED", "ERROR"]
    assert connector_statuses({"status": "SENT"}) is None


def test_log_preview_truncates_text() -> None:
    item = {"id": 4, "level": "WARN", "dateCreated": 1, "logMessage": "x" * 150, "extra": True}
    row = project_item(DatasetKind.LOG_ENTRIES, item)
    assert set(row) == {"id", "level", "dateCreated", "logMessage"}
    assert len(row["logMessage"]) == 100
    assert row["logMessage"].endswith("...")
    assert project_item(DatasetKind.CONNECTION_LOGS, {"id": 1})["information"] == ""


def test_generic_preview_keeps_first_five_fields() -> None:
    item = {key: index for index, key in enumerate("abcdefg")}
    assert project_item(DatasetKind.GENERIC, item) == {"a": 0, "b": 1, "c": 2, "d": 3, "e": 4}
    assert project_item(DatasetKind.CHANNELS, item) == {"a": 0, "b": 1, "c": 2, "d": 3, "e": 4}


def test_preview_is_limited() -> None:
    items = [{"id": index} for index in range(12)]
    summary = build_summary(DatasetKind.GENERIC, items, preview_size=5)
    assert len(summary.preview) == 5


def test_log_level_tally_coalesces_missing() -> None:
    items = [{"level": "INFO"}, {"level": None}, {}, {"level": ""}]
    summary = build_summary(DatasetKind.LOG_ENTRIES, items)
    assert summary.level_counts == {"INFO": 1, UNKNOWN: 3}


def test_empty_dataset_summary() -> None:
    summary = build_summary(DatasetKind.MESSAGES, [])
    assert summary.total_count == 0
    assert summary.preview == []
    assert summary.status_counts is None
    assert summary.date_range is None
