"""Prometheus metrics instrumentation."""

from __future__ import annotations

from fastapi import Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()

DATASETS_STORED = Counter(
    "dsc_datasets_stored_total",
    "Datasets stored in the cache",
    labelnames=("kind",),
    registry=REGISTRY,
)

ITEMS_INGESTED = Counter(
    "dsc_items_ingested_total",
    "Records ingested after normalization",
    labelnames=("kind",),
    registry=REGISTRY,
)

QUERY_COUNT = Counter(
    "dsc_queries_total",
    "Dataset queries by outcome",
    labelnames=("outcome",),
    registry=REGISTRY,
)

QUERY_LATENCY = Histogram(
    "dsc_query_latency_seconds",
    "Latency of dataset queries",
    registry=REGISTRY,
)

DATASETS_EVICTED = Counter(
    "dsc_datasets_evicted_total",
    "Datasets removed from the cache",
    labelnames=("reason",),
    registry=REGISTRY,
)

LIVE_DATASETS = Gauge(
    "dsc_live_datasets",
    "Number of datasets currently cached",
    registry=REGISTRY,
)


def metrics_response() -> Response:
    """Return Prometheus metrics as an HTTP response."""
    payload = generate_latest(REGISTRY)
    return Response(content=payload, media_type=CONTENT_TYPE_LATEST)


__all__ = [
    "REGISTRY",
    "DATASETS_STORED",
    "ITEMS_INGESTED",
    "QUERY_COUNT",
    "QUERY_LATENCY",
    "DATASETS_EVICTED",
    "LIVE_DATASETS",
    "metrics_response",
]
