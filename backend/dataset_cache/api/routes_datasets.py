"""Dataset API routes."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from dataset_cache.api.dependencies import get_dataset_store
from dataset_cache.core.errors import DatasetNotFoundError, ItemNotFoundError
from dataset_cache.models.dto import (
    DatasetMetadata,
    DatasetPage,
    DatasetQuery,
    DeleteResponse,
    QueryRequest,
    StoreRequest,
)
from dataset_cache.store import DatasetStore

router = APIRouter()


@router.post("", response_model=DatasetMetadata, summary="Cache a fetched result set")
async def store_dataset(
    request: StoreRequest,
    store: DatasetStore = Depends(get_dataset_store),
) -> DatasetMetadata:
    return store.store(
        request.kind,
        request.items,
        scope_id=request.scope_id,
        scope_name=request.scope_name,
        ttl_ms=request.ttl_ms,
        identity_field=request.identity_field,
    )


@router.get("", response_model=list[DatasetMetadata], summary="List live datasets")
async def list_datasets(store: DatasetStore = Depends(get_dataset_store)) -> list[DatasetMetadata]:
    return store.list_datasets()


@router.get("/{dataset_id}", response_model=DatasetMetadata, summary="Dataset metadata and summary")
async def get_dataset(dataset_id: str, store: DatasetStore = Depends(get_dataset_store)) -> DatasetMetadata:
    metadata = store.get_metadata(dataset_id)
    if metadata is None:
        raise HTTPException(status_code=404, detail=str(DatasetNotFoundError(dataset_id)))
    return metadata


@router.post("/{dataset_id}/query", response_model=DatasetPage, summary="Filter, search, sort and page a dataset")
async def query_dataset(
    dataset_id: str,
    request: QueryRequest,
    store: DatasetStore = Depends(get_dataset_store),
) -> DatasetPage:
    query = DatasetQuery(dataset_id=dataset_id, **request.model_dump())
    try:
        return store.query(query)
    except DatasetNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.get("/{dataset_id}/items/{item_id}", summary="Full record for one item")
async def get_item(
    dataset_id: str,
    item_id: str,
    store: DatasetStore = Depends(get_dataset_store),
) -> dict[str, Any]:
    item = None
    try:
        for lookup in _candidate_item_ids(item_id):
            item = store.get_by_id(dataset_id, lookup)
            if item is not None:
                break
    except DatasetNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    if item is None:
        raise HTTPException(status_code=404, detail=str(ItemNotFoundError(dataset_id, item_id)))
    return item


@router.delete("/{dataset_id}", response_model=DeleteResponse, summary="Drop a dataset now")
async def delete_dataset(dataset_id: str, store: DatasetStore = Depends(get_dataset_store)) -> DeleteResponse:
    removed = store.delete(dataset_id)
    return DeleteResponse(status="ok" if removed else "noop", deleted=int(removed))


def _candidate_item_ids(raw: str) -> list[int | str]:
    """Path segments are text; numeric ones are tried as integers first."""
    try:
        return [int(raw), raw]
    except ValueError:
        return [raw]


__all__ = ["router"]
