"""Filter, search, sort and paginate stored records.

Each stage takes the working set produced by the previous one and returns a
new list; stored records are never mutated.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Sequence

from dataset_cache.models.entities import Record
from dataset_cache.store.identity import is_number, membership_key, order_key, values_equal
from dataset_cache.utils.text import decimal_text

IdentityFn = Callable[[Record], Any]


@dataclass(slots=True)
class PageWindow:
    page: int
    page_size: int
    total_pages: int
    total_count: int
    items: list[Record]

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1


def filter_by_ids(items: Iterable[Record], ids: Iterable[Any], identity: IdentityFn) -> list[Record]:
    wanted = {membership_key(value) for value in ids}

    def keep(item: Record) -> bool:
        try:
            return membership_key(identity(item)) in wanted
        except TypeError:  # unhashable identity value
            return False

    return [item for item in items if keep(item)]


def filter_by_fields(items: Iterable[Record], filters: Mapping[str, Any]) -> list[Record]:
    """AND together field filters; ``None`` filter values are ignored."""
    active = [(field, value) for field, value in filters.items() if value is not None]
    selected = list(items)
    for field, expected in active:
        selected = [item for item in selected if field_matches(item.get(field), expected)]
    return selected


def field_matches(actual: Any, expected: Any) -> bool:
    if isinstance(actual, str) and isinstance(expected, str):
        return expected.lower() in actual.lower()
    return values_equal(actual, expected)


def search_items(items: Iterable[Record], text: str) -> list[Record]:
    needle = text.lower()
    return [item for item in items if any(_contains(value, needle) for value in item.values())]


def _contains(value: Any, needle: str) -> bool:
    if isinstance(value, str):
        return needle in value.lower()
    if is_number(value):
        return needle in decimal_text(value)
    return False


def sort_items(items: Sequence[Record], field: str, descending: bool = True) -> list[Record]:
    """Stable sort on ``field``; records missing the field trail in either direction."""
    present = [item for item in items if item.get(field) is not None]
    missing = [item for item in items if item.get(field) is None]
    present.sort(key=lambda item: order_key(item[field]), reverse=descending)
    return present + missing


def clamp_page_size(requested: int | None, default: int, maximum: int) -> int:
    if not requested:
        return default
    return max(1, min(requested, maximum))


def paginate(items: Sequence[Record], page: int | None, page_size: int) -> PageWindow:
    """Slice one page; out-of-range page numbers snap to the nearest valid page."""
    total = len(items)
    total_pages = math.ceil(total / page_size)
    current = max(1, min(page or 1, total_pages or 1))
    start = (current - 1) * page_size
    return PageWindow(
        page=current,
        page_size=page_size,
        total_pages=total_pages,
        total_count=total,
        items=list(items[start : start + page_size]),
    )


__all__ = [
    "PageWindow",
    "filter_by_ids",
    "filter_by_fields",
    "field_matches",
    "search_items",
    "sort_items",
    "clamp_page_size",
    "paginate",
]
