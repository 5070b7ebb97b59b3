"""CLI tests with the HTTP layer stubbed out."""

from __future__ import annotations

import json
from typing import Any

import pytest
from typer.testing import CliRunner

from dataset_cache.cli import main as cli

runner = CliRunner()


class _FakeResponse:
    def __init__(self, payload: Any, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code
        self.ok = status_code < 400
        self.text = json.dumps(payload)

    def json(self) -> Any:
        return self._payload


@pytest.fixture
def calls(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, Any]]:
    recorded: list[dict[str, Any]] = []

    def fake_request(method: str, url: str, timeout: int, **kwargs: Any) -> _FakeResponse:
        recorded.append({"method": method, "url": url, **kwargs})
        if url.endswith("/missing"):
            return _FakeResponse({"detail": "Dataset not found"}, status_code=404)
        return _FakeResponse({"ok": True})

    monkeypatch.setattr(cli.requests, "request", fake_request)
    return recorded


def test_query_builds_payload(calls: list[dict[str, Any]]) -> None:
    result = runner.invoke(
        cli.app,
        [
            "query", "ds_1",
            "--filter", "level=ERROR",
            "--filter", "processed=true",
            "--id", "7",
            "--search", "timeout",
            "--sort-by", "dateCreated",
            "--order", "asc",
            "--page-size", "25",
        ],
    )
    assert result.exit_code == 0, result.output
    call = calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "http://127.0.0.1:5180/datasets/ds_1/query"
    assert call["json"] == {
        "page": 1,
        "sort_order": "asc",
        "filters": {"level": "ERROR", "processed": True},
        "ids": [7, "7"],
        "search": "timeout",
        "sort_by": "dateCreated",
        "page_size": 25,
    }


def test_host_from_environment(calls: list[dict[str, Any]], monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DSC_HOST", "http://cache.local:9000/")
    result = runner.invoke(cli.app, ["datasets", "list"])
    assert result.exit_code == 0
    assert calls[0]["url"] == "http://cache.local:9000/datasets"


def test_get_item(calls: list[dict[str, Any]]) -> None:
    result = runner.invoke(cli.app, ["get", "ds_1", "42"])
    assert result.exit_code == 0
    assert calls[0]["url"].endswith("/datasets/ds_1/items/42")


def test_error_response_exits_nonzero(calls: list[dict[str, Any]]) -> None:
    result = runner.invoke(cli.app, ["datasets", "show", "missing"])
    assert result.exit_code == 1


def test_bad_filter_is_rejected(calls: list[dict[str, Any]]) -> None:
    result = runner.invoke(cli.app, ["query", "ds_1", "--filter", "no-equals"])
    assert result.exit_code != 0
    assert calls == []


def test_non_numeric_ids_sent_as_text(calls: list[dict[str, Any]]) -> None:
    result = runner.invoke(cli.app, ["query", "ds_1", "--id", "abc-1"])
    assert result.exit_code == 0, result.output
    assert calls[0]["json"]["ids"] == ["abc-1"]
