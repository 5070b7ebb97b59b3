"""Flatten raw upstream payloads into a sequence of records.

Upstream APIs return either a plain list of records or a one-element list
holding a wrapper such as ``{"list": {"event": [...]}}``. When the wrapped
collection holds a single record the API drops the array and returns the
object itself: ``{"list": {"event": {...}}}``.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

from dataset_cache.core.logging import get_logger
from dataset_cache.models.entities import Record

logger = get_logger(__name__)

WRAPPER_KEY = "list"
SCALAR_KEY = "value"


def normalize_items(raw: Sequence[Any] | None) -> list[Record]:
    """Return the flat records contained in ``raw``; never raises."""
    if raw is None:
        return []
    if isinstance(raw, (Mapping, str, bytes)) or not isinstance(raw, Iterable):
        items: list[Any] = [raw]
    else:
        items = list(raw)
    if not items:
        return []
    unwrapped = _unwrap(items[0])
    if unwrapped is not None:
        logger.debug("Unwrapped %s records from %r container", len(unwrapped), WRAPPER_KEY)
        items = unwrapped
    return [_as_record(item) for item in items]


def _unwrap(first: Any) -> list[Any] | None:
    if not isinstance(first, Mapping) or WRAPPER_KEY not in first:
        return None
    container = first[WRAPPER_KEY]
    if not isinstance(container, Mapping):
        logger.debug("Wrapper %r is not an object; keeping payload as-is", WRAPPER_KEY)
        return None
    for value in container.values():
        if isinstance(value, list):
            return value
        if isinstance(value, Mapping):
            return [value]
    logger.debug("Wrapper %r holds no records; keeping payload as-is", WRAPPER_KEY)
    return None


def _as_record(item: Any) -> Record:
    if isinstance(item, dict):
        return item
    if isinstance(item, Mapping):
        return dict(item)
    return {SCALAR_KEY: item}


__all__ = ["normalize_items", "WRAPPER_KEY"]
