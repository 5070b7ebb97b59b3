"""Text processing helpers."""

from __future__ import annotations

from typing import Any

ELLIPSIS = "..."


def truncate(value: Any, max_length: int) -> str:
    """Cut strings longer than ``max_length`` and mark them with an ellipsis."""
    if not value:
        return ""
    text = value if isinstance(value, str) else str(value)
    if len(text) <= max_length:
        return text
    return text[: max_length - len(ELLIPSIS)] + ELLIPSIS


def decimal_text(value: int | float) -> str:
    """Decimal form of a number; integral floats drop the ``.0``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
