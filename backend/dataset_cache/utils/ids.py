"""ID helpers."""

from __future__ import annotations

import uuid

DATASET_PREFIX = "ds"


def new_dataset_id() -> str:
    """Generate an opaque dataset identifier, e.g. ``ds_3f2a...``."""
    return f"{DATASET_PREFIX}_{uuid.uuid4().hex}"
