"""Weather-aware random outfit generation with transparent path choice."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import AbstractSet, Callable, Dict, Iterable, Optional, Sequence, Tuple

from models.outfit import Outfit
from models.taxonomy import CATEGORIES, is_known_category
from models.wardrobe_item import WardrobeItem
from models.weather import Weather

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratorSettings:
    """Tunable probabilities and temperature bands.

    The probabilities are tuning knobs, not contracts. Only the structural
    guarantees of :func:`generate_outfit` are fixed.
    """

    dress_probability: float = 0.6
    outerwear_probability: float = 0.5
    accessory_probability: float = 0.3
    cold_threshold_c: float = 12.0
    mild_threshold_c: float = 18.0

    def __post_init__(self) -> None:
        for name in ("dress_probability", "outerwear_probability", "accessory_probability"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be between 0 and 1, got {value}")
        if self.cold_threshold_c > self.mild_threshold_c:
            raise ValueError("cold_threshold_c cannot exceed mild_threshold_c")


DEFAULT_SETTINGS = GeneratorSettings()


@dataclass(frozen=True)
class CategoryPools:
    """Items available for each outfit slot."""

    tops: Tuple[WardrobeItem, ...] = ()
    bottoms: Tuple[WardrobeItem, ...] = ()
    shoes: Tuple[WardrobeItem, ...] = ()
    dresses: Tuple[WardrobeItem, ...] = ()
    outerwear: Tuple[WardrobeItem, ...] = ()
    accessories: Tuple[WardrobeItem, ...] = ()

    @classmethod
    def from_items(cls, items: Iterable[WardrobeItem]) -> "CategoryPools":
        """Partition items by category; the first record of a repeated id wins."""

        grouped: Dict[str, list] = {category: [] for category in CATEGORIES}
        seen = set()
        for item in items:
            if item.item_id in seen:
                continue
            seen.add(item.item_id)
            if is_known_category(item.category):
                grouped[item.category].append(item)
        return cls(**{_POOL_FIELDS[category]: tuple(values) for category, values in grouped.items()})

    def pool(self, category: str) -> Tuple[WardrobeItem, ...]:
        attribute = _POOL_FIELDS.get(category)
        return getattr(self, attribute) if attribute else ()

    def map(self, transform: Callable[[Sequence[WardrobeItem]], Sequence[WardrobeItem]]) -> "CategoryPools":
        """Apply ``transform`` to every pool."""

        return CategoryPools(
            **{attribute: tuple(transform(self.pool(category))) for category, attribute in _POOL_FIELDS.items()}
        )

    def restricted(self, used_item_ids: Optional[AbstractSet[str]]) -> "CategoryPools":
        """Prefer unused items, falling back per pool when all were used."""

        if not used_item_ids:
            return self

        def prefer_unused(pool: Sequence[WardrobeItem]) -> Sequence[WardrobeItem]:
            unused = [item for item in pool if item.item_id not in used_item_ids]
            return unused or pool

        return self.map(prefer_unused)

    def sizes(self) -> Dict[str, int]:
        return {category: len(self.pool(category)) for category in CATEGORIES}


_POOL_FIELDS = {
    "Top": "tops",
    "Bottom": "bottoms",
    "Shoes": "shoes",
    "Dress": "dresses",
    "Outerwear": "outerwear",
    "Accessory": "accessories",
}


def _pick(pool: Sequence[WardrobeItem], rng: random.Random) -> Optional[WardrobeItem]:
    return rng.choice(pool) if pool else None


def _choose_dress_path(pools: CategoryPools, rng: random.Random, settings: GeneratorSettings) -> bool:
    dress_possible = bool(pools.dresses)
    pair_possible = bool(pools.tops) and bool(pools.bottoms)
    if dress_possible and pair_possible:
        return rng.random() < settings.dress_probability
    # With only one satisfiable path take it; with none, show what exists.
    return dress_possible


def _include_outerwear(weather: Optional[Weather], rng: random.Random, settings: GeneratorSettings) -> bool:
    temperature = weather.temperature_celsius if weather is not None else None
    if temperature is None:
        return rng.random() < settings.outerwear_probability
    if temperature < settings.cold_threshold_c:
        return True
    if temperature < settings.mild_threshold_c or weather.is_rainy:
        return rng.random() < settings.outerwear_probability
    return False


def generate_outfit(
    pools: CategoryPools,
    weather: Optional[Weather] = None,
    used_item_ids: Optional[AbstractSet[str]] = None,
    rng: Optional[random.Random] = None,
    settings: Optional[GeneratorSettings] = None,
) -> Outfit:
    """Draw one outfit from the pools.

    Never raises for empty pools: slots that cannot be filled stay ``None``
    and the caller decides what an incomplete outfit means for the user.
    Whenever shoes exist alongside a dress or a top and a bottom, the result
    is complete.
    """

    rng = rng or random.Random()
    settings = settings or DEFAULT_SETTINGS
    available = pools.restricted(used_item_ids)

    shoes = _pick(available.shoes, rng)
    if _choose_dress_path(available, rng, settings):
        outfit = Outfit(dress=_pick(available.dresses, rng), shoes=shoes)
    else:
        outfit = Outfit(top=_pick(available.tops, rng), bottom=_pick(available.bottoms, rng), shoes=shoes)

    if available.outerwear and _include_outerwear(weather, rng, settings):
        outfit = outfit.with_slot("Outerwear", _pick(available.outerwear, rng))
    if available.accessories and rng.random() < settings.accessory_probability:
        outfit = outfit.with_slot("Accessory", _pick(available.accessories, rng))

    logger.info(
        "Generated outfit path=%s complete=%s slots=%s",
        "dress" if outfit.dress is not None else "top_bottom",
        outfit.is_complete,
        outfit.populated_categories,
    )
    return outfit


__all__ = ["CategoryPools", "DEFAULT_SETTINGS", "GeneratorSettings", "generate_outfit"]
