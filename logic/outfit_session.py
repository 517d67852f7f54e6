"""Shuffle and lock handling for an outfit-editing session."""

from __future__ import annotations

import logging
import random
from typing import AbstractSet, FrozenSet, Iterable, Optional

from logic.outfit_generator import DEFAULT_SETTINGS, CategoryPools, GeneratorSettings, generate_outfit
from models.outfit import Outfit
from models.taxonomy import OPTIONAL_CATEGORIES, is_known_category
from models.wardrobe_item import WardrobeItem
from models.weather import Weather

logger = logging.getLogger(__name__)

STATE_EMPTY = "empty"
STATE_GENERATED = "generated"


def shuffle_outfit(
    outfit: Outfit,
    pools: CategoryPools,
    locked: AbstractSet[str] = frozenset(),
    rng: Optional[random.Random] = None,
) -> Outfit:
    """Redraw every populated slot that is not locked.

    The current occupant is excluded from the draw whenever another item is
    available, so the slot visibly changes. A pool holding only the current
    item leaves the slot as it is.
    """

    rng = rng or random.Random()
    shuffled = outfit
    for category in outfit.populated_categories:
        if category in locked:
            continue
        current = outfit.slot(category)
        candidates = [item for item in pools.pool(category) if item.item_id != current.item_id]
        if candidates:
            shuffled = shuffled.with_slot(category, rng.choice(candidates))
    return shuffled


class OutfitSession:
    """Client-held editing state: the pools, current outfit and lock set.

    States go ``empty -> generated`` and then loop on regenerate and shuffle.
    None of the operations raise; misuse is logged and ignored.
    """

    def __init__(
        self,
        items: Iterable[WardrobeItem],
        weather: Optional[Weather] = None,
        rng: Optional[random.Random] = None,
        settings: Optional[GeneratorSettings] = None,
    ) -> None:
        self.pools = CategoryPools.from_items(items)
        self.weather = weather
        self.rng = rng or random.Random()
        self.settings = settings or DEFAULT_SETTINGS
        self.outfit: Optional[Outfit] = None
        self.locked: FrozenSet[str] = frozenset()

    @property
    def state(self) -> str:
        return STATE_EMPTY if self.outfit is None else STATE_GENERATED

    @property
    def can_shuffle(self) -> bool:
        """True when at least one populated slot is unlocked."""

        if self.outfit is None:
            return False
        return any(category not in self.locked for category in self.outfit.populated_categories)

    def generate(self, weather: Optional[Weather] = None) -> Outfit:
        """Draw a fresh outfit, ignoring the previous one."""

        if weather is not None:
            self.weather = weather
        self.outfit = generate_outfit(self.pools, weather=self.weather, rng=self.rng, settings=self.settings)
        return self.outfit

    def shuffle(self, locked: Optional[AbstractSet[str]] = None) -> Outfit:
        """Redraw unlocked slots; ``locked`` overrides the session lock set."""

        if self.outfit is None:
            logger.info("Shuffle requested before any outfit was generated")
            return Outfit()
        lock_set = self.locked if locked is None else frozenset(locked)
        self.outfit = shuffle_outfit(self.outfit, self.pools, lock_set, self.rng)
        return self.outfit

    def toggle_lock(self, category: str) -> bool:
        """Flip the lock on ``category`` and return whether it is now locked."""

        if not is_known_category(category):
            logger.warning("Ignoring lock toggle for unknown category %r", category)
            return False
        if category in self.locked:
            self.locked = self.locked - {category}
            return False
        self.locked = self.locked | {category}
        return True

    def unlock_all(self) -> None:
        self.locked = frozenset()

    def remove_item(self, category: str) -> Optional[Outfit]:
        """Clear an optional slot and unlock it."""

        if category not in OPTIONAL_CATEGORIES:
            logger.warning("Only optional slots can be removed, got %r", category)
            return self.outfit
        self.locked = self.locked - {category}
        if self.outfit is not None:
            self.outfit = self.outfit.with_slot(category, None)
        return self.outfit

    def select_item(self, category: str, item: WardrobeItem) -> Optional[Outfit]:
        """Put a specific item into a slot, as when the user picks one by hand."""

        if not is_known_category(category) or item.category != category:
            logger.warning("Item %s does not belong in slot %r", item.item_id, category)
            return self.outfit
        self.outfit = (self.outfit or Outfit()).with_slot(category, item)
        return self.outfit


__all__ = ["OutfitSession", "STATE_EMPTY", "STATE_GENERATED", "shuffle_outfit"]
