"""Identity resolution and value helpers shared by the store modules."""

from __future__ import annotations

from numbers import Number
from typing import Any, Mapping

import orjson

DEFAULT_IDENTITY = 0


def resolve_identity(item: Mapping[str, Any], primary: str, fallback: str) -> Any:
    """Return the item's identity: ``primary`` field, then ``fallback``, then ``0``."""
    value = item.get(primary)
    if value is not None:
        return value
    value = item.get(fallback)
    if value is not None:
        return value
    return DEFAULT_IDENTITY


def is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def values_equal(left: Any, right: Any) -> bool:
    """Strict equality: booleans never match numbers."""
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    return left == right


def membership_key(value: Any) -> tuple[bool, Any]:
    """Hashable key under which ``True`` and ``1`` stay distinct."""
    return (isinstance(value, bool), value)


def order_key(value: Any) -> tuple[int, Any]:
    """Sort key that orders mixed types as numbers < strings < everything else."""
    if is_number(value):
        return (0, value)
    if isinstance(value, str):
        return (1, value)
    if isinstance(value, bool):
        return (2, int(value))
    try:
        encoded = orjson.dumps(value, option=orjson.OPT_SORT_KEYS | orjson.OPT_NON_STR_KEYS, default=str)
    except TypeError:  # e.g. integers beyond 64 bits
        return (4, repr(value))
    return (3, encoded.decode("utf-8"))


__all__ = ["DEFAULT_IDENTITY", "resolve_identity", "is_number", "values_equal", "membership_key", "order_key"]
