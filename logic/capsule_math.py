"""Capsule wardrobe combinatorics: outfit counts, breakdowns and gap suggestions.

Every function here is total. Unknown categories are ignored, empty inputs
produce zeros, and the caller's lists are never mutated.

Counting model::

    base  = dresses * shoes + tops * bottoms * shoes
    total = base * (outerwear + 1) * (accessories + 1)

Dress outfits and top+bottom outfits are separate additive groups. Each core
outfit may carry one outerwear piece or none and, independently, one
accessory or none.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Sequence

from models.taxonomy import CATEGORIES, is_known_category
from models.wardrobe_item import WardrobeItem

logger = logging.getLogger(__name__)

MIN_CAPSULE_ITEMS = 10
MAX_GAP_SUGGESTIONS = 5


@dataclass(frozen=True)
class CategoryCounts:
    """Per-category item totals, the only input the outfit count needs."""

    tops: int = 0
    bottoms: int = 0
    shoes: int = 0
    dresses: int = 0
    outerwear: int = 0
    accessories: int = 0

    @classmethod
    def from_items(cls, items: Iterable[WardrobeItem]) -> "CategoryCounts":
        """Partition once; the first record of a repeated id wins."""

        totals = {category: 0 for category in CATEGORIES}
        for item in unique_items(items):
            if is_known_category(item.category):
                totals[item.category] += 1
        return cls(
            tops=totals["Top"],
            bottoms=totals["Bottom"],
            shoes=totals["Shoes"],
            dresses=totals["Dress"],
            outerwear=totals["Outerwear"],
            accessories=totals["Accessory"],
        )

    def get(self, category: str) -> int:
        attribute = _COUNT_FIELDS.get(category)
        return getattr(self, attribute) if attribute else 0

    def with_added(self, category: str) -> "CategoryCounts":
        """Counts as they would be with one more item of ``category``."""

        attribute = _COUNT_FIELDS.get(category)
        if attribute is None:
            return self
        return replace(self, **{attribute: getattr(self, attribute) + 1})

    def outfit_total(self) -> int:
        if self.shoes == 0:
            return 0
        base = self.dresses * self.shoes + self.tops * self.bottoms * self.shoes
        return base * (self.outerwear + 1) * (self.accessories + 1)

    def as_dict(self) -> Dict[str, int]:
        return {category: self.get(category) for category in CATEGORIES}


_COUNT_FIELDS = {
    "Top": "tops",
    "Bottom": "bottoms",
    "Shoes": "shoes",
    "Dress": "dresses",
    "Outerwear": "outerwear",
    "Accessory": "accessories",
}


@dataclass(frozen=True)
class GapSuggestion:
    item: WardrobeItem
    outfit_increase: int
    new_total: int


@dataclass(frozen=True)
class CapsuleSummary:
    item_count: int
    total_outfits: int
    breakdown: Dict[str, int]
    ready: bool
    suggestions: List[GapSuggestion] = field(default_factory=list)


def unique_items(items: Iterable[WardrobeItem]) -> List[WardrobeItem]:
    """Drop repeated ids, keeping the first occurrence in input order."""

    seen = set()
    unique = []
    for item in items:
        if item.item_id in seen:
            continue
        seen.add(item.item_id)
        unique.append(item)
    return unique


def count_outfits(items: Iterable[WardrobeItem]) -> int:
    """Number of distinct complete outfits the items can produce."""

    return CategoryCounts.from_items(items).outfit_total()


def category_breakdown(items: Iterable[WardrobeItem]) -> Dict[str, int]:
    """Item count per known category, omitting categories with no items."""

    counts = CategoryCounts.from_items(items)
    return {category: counts.get(category) for category in CATEGORIES if counts.get(category) > 0}


def suggest_gaps(
    selected: Sequence[WardrobeItem],
    all_items: Sequence[WardrobeItem],
    limit: Optional[int] = None,
) -> List[GapSuggestion]:
    """Rank unselected items by how many outfits each one would add.

    Items that add nothing are left out. Ties keep the order of ``all_items``.
    """

    counts = CategoryCounts.from_items(selected)
    current_total = counts.outfit_total()
    selected_ids = {item.item_id for item in selected}

    suggestions: List[GapSuggestion] = []
    for item in unique_items(all_items):
        if item.item_id in selected_ids:
            continue
        new_total = counts.with_added(item.category).outfit_total()
        increase = new_total - current_total
        if increase <= 0:
            continue
        suggestions.append(GapSuggestion(item=item, outfit_increase=increase, new_total=new_total))

    suggestions.sort(key=lambda suggestion: -suggestion.outfit_increase)
    if limit is not None:
        suggestions = suggestions[: max(limit, 0)]
    logger.debug("Scored gap suggestions: current=%s returned=%s", current_total, len(suggestions))
    return suggestions


def outfit_potential(category: str, wardrobe_items: Iterable[WardrobeItem]) -> int:
    """Outfits a prospective item of ``category`` would add to the wardrobe.

    Used to rate wish-list entries before they are bought.
    """

    counts = CategoryCounts.from_items(wardrobe_items)
    return counts.with_added(category).outfit_total() - counts.outfit_total()


def summarize_capsule(
    selected: Sequence[WardrobeItem],
    all_items: Sequence[WardrobeItem],
    min_items: int = MIN_CAPSULE_ITEMS,
    max_suggestions: Optional[int] = MAX_GAP_SUGGESTIONS,
) -> CapsuleSummary:
    """Totals for a capsule selection, with suggestions once it is big enough."""

    item_count = len(unique_items(selected))
    ready = item_count >= min_items
    suggestions = suggest_gaps(selected, all_items, limit=max_suggestions) if ready else []
    summary = CapsuleSummary(
        item_count=item_count,
        total_outfits=count_outfits(selected),
        breakdown=category_breakdown(selected),
        ready=ready,
        suggestions=suggestions,
    )
    logger.info(
        "Summarised capsule with %s items -> %s outfits (ready=%s)",
        item_count,
        summary.total_outfits,
        ready,
    )
    return summary


__all__ = [
    "CategoryCounts",
    "CapsuleSummary",
    "GapSuggestion",
    "MAX_GAP_SUGGESTIONS",
    "MIN_CAPSULE_ITEMS",
    "category_breakdown",
    "count_outfits",
    "outfit_potential",
    "suggest_gaps",
    "summarize_capsule",
    "unique_items",
]
