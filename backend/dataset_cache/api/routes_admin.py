"""Administrative routes for the dataset cache."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from dataset_cache.api.dependencies import get_dataset_store
from dataset_cache.core.metrics import metrics_response
from dataset_cache.models.dto import StatsResponse
from dataset_cache.store import DatasetStore

router = APIRouter()


@router.get("/stats", response_model=StatsResponse, summary="Live dataset and item counts")
async def get_stats(store: DatasetStore = Depends(get_dataset_store)) -> StatsResponse:
    store.sweep()
    return StatsResponse(**store.stats())


@router.get("/metrics", summary="Prometheus metrics")
async def get_metrics():
    return metrics_response()


__all__ = ["router"]
