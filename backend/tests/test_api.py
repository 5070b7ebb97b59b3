"""API integration tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from dataset_cache.app import app


@pytest.fixture
def client() -> TestClient:
    with TestClient(app) as test_client:
        yield test_client


def test_health(client: TestClient) -> None:
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["ok"] is True


def test_store_query_lookup_flow(client: TestClient) -> None:
    store_resp = client.post(
        "/datasets",
        json={
            "kind": "events",
            "items": [{"list": {"event": [
                {"id": 1, "level": "ERROR", "outcome": "FAILED"},
                {"id": 2, "level": "INFO", "outcome": "SUCCESS"},
            ]}}],
            "scope_name": "ADT Inbound",
        },
    )
    assert store_resp.status_code == 200
    metadata = store_resp.json()
    dataset_id = metadata["id"]
    assert metadata["kind"] == "events"
    assert metadata["summary"]["level_counts"] == {"ERROR": 1, "INFO": 1}
    assert metadata["total_pages"] == 1

    query_resp = client.post(f"/datasets/{dataset_id}/query", json={"filters": {"level": "error"}})
    assert query_resp.status_code == 200
    page = query_resp.json()
    assert [item["id"] for item in page["items"]] == [1]
    assert page["has_next"] is False

    item_resp = client.get(f"/datasets/{dataset_id}/items/2")
    assert item_resp.status_code == 200
    assert item_resp.json()["outcome"] == "SUCCESS"

    missing_item = client.get(f"/datasets/{dataset_id}/items/99")
    assert missing_item.status_code == 404

    listed = client.get("/datasets").json()
    assert [entry["id"] for entry in listed] == [dataset_id]
    assert client.get(f"/datasets/{dataset_id}").json()["scope_name"] == "ADT Inbound"

    stats = client.get("/stats").json()
    assert stats == {"datasets": 1, "items": 2}

    delete_resp = client.delete(f"/datasets/{dataset_id}")
    assert delete_resp.json() == {"status": "ok", "deleted": 1}
    assert client.delete(f"/datasets/{dataset_id}").json() == {"status": "noop", "deleted": 0}


def test_unknown_dataset_is_404(client: TestClient) -> None:
    assert client.get("/datasets/ds_missing").status_code == 404
    assert client.post("/datasets/ds_missing/query", json={}).status_code == 404
    assert client.get("/datasets/ds_missing/items/1").status_code == 404


def test_string_item_ids(client: TestClient) -> None:
    dataset_id = client.post(
        "/datasets",
        json={"kind": "channels", "items": [{"id": "abc-1", "name": "A"}, {"id": "abc-2", "name": "B"}]},
    ).json()["id"]
    assert client.get(f"/datasets/{dataset_id}/items/abc-2").json()["name"] == "B"


def test_invalid_kind_rejected(client: TestClient) -> None:
    resp = client.post("/datasets", json={"kind": "nope", "items": []})
    assert resp.status_code == 422


def test_metrics_endpoint(client: TestClient) -> None:
    client.post("/datasets", json={"kind": "generic", "items": [{"id": 1}]})
    resp = client.get("/metrics")
    assert resp.status_code == 200
    assert "dsc_datasets_stored_total" in resp.text


def test_numeric_looking_string_ids(client: TestClient) -> None:
    dataset_id = client.post(
        "/datasets",
        json={"kind": "generic", "items": [{"id": "123", "name": "text"}, {"id": "00123", "name": "padded"}, {"id": 7}]},
    ).json()["id"]
    assert client.get(f"/datasets/{dataset_id}/items/123").json()["name"] == "text"
    assert client.get(f"/datasets/{dataset_id}/items/00123").json()["name"] == "padded"
    assert client.get(f"/datasets/{dataset_id}/items/7").json() == {"id": 7}
    assert client.get(f"/datasets/{dataset_id}/items/124").status_code == 404
