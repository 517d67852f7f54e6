"""Outfit value produced by the generator and the shuffle session."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, List, Optional

from models.taxonomy import CATEGORIES, is_known_category, slot_name
from models.wardrobe_item import WardrobeItem


@dataclass(frozen=True)
class Outfit:
    """One outfit: a dress path or a top+bottom path plus optional extras.

    Empty slots are explicit ``None`` so callers can tell an incomplete
    outfit apart from a complete one.
    """

    top: Optional[WardrobeItem] = None
    bottom: Optional[WardrobeItem] = None
    dress: Optional[WardrobeItem] = None
    shoes: Optional[WardrobeItem] = None
    outerwear: Optional[WardrobeItem] = None
    accessory: Optional[WardrobeItem] = None

    @property
    def is_complete(self) -> bool:
        """Shoes plus either a dress or both a top and a bottom."""

        has_core = self.dress is not None or (self.top is not None and self.bottom is not None)
        return self.shoes is not None and has_core

    def missing_core_categories(self) -> List[str]:
        """Categories still needed before the outfit is complete."""

        missing = [] if self.shoes is not None else ["Shoes"]
        if self.dress is None and (self.top is None or self.bottom is None):
            missing.extend(category for category in ("Top", "Bottom") if self.slot(category) is None)
        return missing

    @property
    def is_empty(self) -> bool:
        return not self.populated_categories

    @property
    def populated_categories(self) -> List[str]:
        return [category for category in CATEGORIES if self.slot(category) is not None]

    def slot(self, category: str) -> Optional[WardrobeItem]:
        if not is_known_category(category):
            return None
        return getattr(self, slot_name(category))

    def with_slot(self, category: str, item: Optional[WardrobeItem]) -> "Outfit":
        """Return a copy with ``category``'s slot replaced."""

        if not is_known_category(category):
            return self
        return replace(self, **{slot_name(category): item})

    def item_ids(self) -> List[str]:
        return [item.item_id for item in self.items()]

    def items(self) -> List[WardrobeItem]:
        return [item for item in (self.slot(category) for category in CATEGORIES) if item is not None]

    def as_dict(self) -> Dict[str, Optional[str]]:
        """Slot name to item id, with ``None`` for empty slots."""

        return {
            slot_name(category): (item.item_id if item is not None else None)
            for category, item in ((category, self.slot(category)) for category in CATEGORIES)
        }


__all__ = ["Outfit"]
