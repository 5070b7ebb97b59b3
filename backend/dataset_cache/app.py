"""FastAPI application setup for the dataset cache."""

from __future__ import annotations

from fastapi import FastAPI

from dataset_cache.api.dependencies import (
    get_app_settings,
    get_dataset_store,
    shutdown_dataset_store,
)
from dataset_cache.api.routes_admin import router as admin_router
from dataset_cache.api.routes_datasets import router as datasets_router
from dataset_cache.core.logging import configure_logging

_settings = get_app_settings()
configure_logging(_settings.log_level, use_json=_settings.log_json)

app = FastAPI(
    title="Dataset Cache",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.include_router(datasets_router, prefix="/datasets", tags=["datasets"])
app.include_router(admin_router, prefix="", tags=["admin"])


@app.on_event("startup")
async def startup() -> None:
    """Create the dataset store and start its expiry sweeper."""
    get_dataset_store()


@app.on_event("shutdown")
async def shutdown() -> None:
    """Stop the sweeper and drop cached datasets."""
    shutdown_dataset_store()


@app.get("/health", tags=["admin"])
def health() -> dict[str, bool]:
    """Simple liveness check."""
    return {"ok": True}
