"""Helpers for JSON-like user documents."""

import copy
from typing import Any


def merge_documents(
    existing: dict[str, Any] | None,
    update: dict[str, Any],
) -> dict[str, Any]:
    """Merge ``update`` into ``existing`` without mutating either.

    Nested maps merge key by key; lists and scalars in ``update`` replace
    the stored value.

    Args:
        existing: Stored document, or None when nothing is stored yet.
        update: Partial or full document to merge in.

    Returns:
        dict[str, Any]: New merged document.
    """
    merged = copy.deepcopy(existing) if existing else {}
    for key, value in update.items():
        current = merged.get(key)
        if isinstance(value, dict) and isinstance(current, dict):
            merged[key] = merge_documents(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


__all__ = ["merge_documents"]
