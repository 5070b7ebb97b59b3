"""In-memory dataset store components."""

from .manager import DatasetStore
from .normalize import normalize_items
from .summary import build_summary
from .sweeper import ExpirySweeper

__all__ = [
    "DatasetStore",
    "normalize_items",
    "build_summary",
    "ExpirySweeper",
]
