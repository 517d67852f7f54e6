"""Wardrobe item data model and helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

_KNOWN_KEYS = {"id", "item_id", "category", "image_url", "image_ref", "ai_analysis"}


@dataclass(frozen=True)
class WardrobeItem:
    """Represents an item in the user's wardrobe.

    Only ``item_id`` and ``category`` matter to the outfit engines. The image
    reference and any extra columns from the store travel along untouched.
    """

    item_id: str
    category: str
    image_ref: str = ""
    ai_analysis: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)


def from_raw_metadata(metadata: Dict[str, Any]) -> WardrobeItem:
    """Factory to build a :class:`WardrobeItem` from a loose store row.

    Accepts both ``id``/``item_id`` and ``image_url``/``image_ref`` spellings.
    The category is copied verbatim, unknown labels included.
    """

    item_id = metadata.get("item_id") or metadata.get("id")
    category = metadata.get("category")
    missing = [name for name, value in (("id", item_id), ("category", category)) if not value]
    if missing:
        raise ValueError(f"Missing required fields for WardrobeItem: {missing}")

    return WardrobeItem(
        item_id=str(item_id),
        category=str(category),
        image_ref=str(metadata.get("image_ref") or metadata.get("image_url") or ""),
        ai_analysis=metadata.get("ai_analysis"),
        extra={key: value for key, value in metadata.items() if key not in _KNOWN_KEYS},
    )


__all__ = ["WardrobeItem", "from_raw_metadata"]
