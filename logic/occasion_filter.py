"""Keyword-based occasion filtering over the item analysis text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from models.wardrobe_item import WardrobeItem


@dataclass(frozen=True)
class OccasionKeywords:
    include: Tuple[str, ...]
    exclude: Tuple[str, ...] = ()


OCCASIONS: Dict[str, OccasionKeywords] = {
    "athletic": OccasionKeywords(
        include=(
            "athletic", "gym", "workout", "sports", "exercise", "running",
            "training", "casual", "t-shirt", "shorts", "trainers", "sneakers",
        ),
        exclude=("formal", "business", "dress", "suit", "elegant"),
    ),
    "work": OccasionKeywords(
        include=(
            "business", "professional", "formal", "smart", "casual", "dress",
            "office", "work", "blazer", "shirt", "trousers",
        ),
        exclude=("athletic", "gym", "beach", "swim"),
    ),
    "evening": OccasionKeywords(
        include=("dress", "elegant", "stylish", "formal", "nice", "evening", "smart", "cocktail"),
        exclude=("athletic", "gym", "casual"),
    ),
    "casual": OccasionKeywords(
        include=("casual", "comfortable", "relaxed", "everyday", "t-shirt", "jeans"),
        exclude=("formal", "athletic"),
    ),
    "formal": OccasionKeywords(
        include=("formal", "dress", "suit", "elegant", "black tie", "cocktail", "gown"),
        exclude=("casual", "athletic", "beach"),
    ),
    "beach": OccasionKeywords(
        include=("beach", "swim", "shorts", "sandals", "casual", "summer", "light"),
        exclude=("formal", "business", "work"),
    ),
    "physical_work": OccasionKeywords(
        include=("durable", "practical", "casual", "jeans", "sturdy", "work"),
        exclude=("delicate", "formal", "dress"),
    ),
    "date": OccasionKeywords(
        include=("dress", "elegant", "stylish", "nice", "smart", "formal"),
        exclude=("athletic", "gym"),
    ),
    "travel": OccasionKeywords(include=("comfortable", "casual", "practical")),
}

DEFAULT_OCCASION = "casual"


def _matches(item: WardrobeItem, keywords: OccasionKeywords) -> bool:
    analysis = (item.ai_analysis or "").lower()
    if any(keyword in analysis for keyword in keywords.exclude):
        return False
    return any(keyword in analysis for keyword in keywords.include)


def filter_by_occasion(items: Sequence[WardrobeItem], occasion: str | None) -> List[WardrobeItem]:
    """Keep items whose analysis suits ``occasion``.

    Unknown occasions use the casual keywords. When nothing matches, the
    input comes back unchanged so a pool is never emptied by filtering.
    """

    keywords = OCCASIONS.get((occasion or DEFAULT_OCCASION).lower(), OCCASIONS[DEFAULT_OCCASION])
    filtered = [item for item in items if _matches(item, keywords)]
    return filtered if filtered else list(items)


__all__ = ["DEFAULT_OCCASION", "OCCASIONS", "OccasionKeywords", "filter_by_occasion"]
