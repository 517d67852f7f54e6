"""Multi-day trip outfits that spread wear across the wardrobe."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from functools import partial
from typing import FrozenSet, Iterable, List, Optional, Sequence, Tuple

from logic.occasion_filter import filter_by_occasion
from logic.outfit_generator import DEFAULT_SETTINGS, CategoryPools, GeneratorSettings, generate_outfit
from models.outfit import Outfit
from models.wardrobe_item import WardrobeItem
from models.weather import Weather

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DayOutfit:
    day_number: int
    weather: Optional[Weather]
    outfit: Outfit


@dataclass(frozen=True)
class TripPlan:
    days: List[DayOutfit] = field(default_factory=list)
    used_item_ids: FrozenSet[str] = frozenset()

    @property
    def incomplete_days(self) -> List[int]:
        return [day.day_number for day in self.days if not day.outfit.is_complete]


def generate_day(
    pools: CategoryPools,
    weather: Optional[Weather],
    used_item_ids: FrozenSet[str],
    rng: Optional[random.Random] = None,
    settings: Optional[GeneratorSettings] = None,
) -> Tuple[Outfit, FrozenSet[str]]:
    """One fold step: the day's outfit and the used set including it."""

    outfit = generate_outfit(pools, weather=weather, used_item_ids=used_item_ids, rng=rng, settings=settings)
    return outfit, used_item_ids | frozenset(outfit.item_ids())


def plan_trip(
    items: Iterable[WardrobeItem],
    forecasts: Sequence[Optional[Weather]] = (),
    days: Optional[int] = None,
    occasion: Optional[str] = None,
    rng: Optional[random.Random] = None,
    settings: Optional[GeneratorSettings] = None,
) -> TripPlan:
    """Generate one outfit per day, preferring items not yet worn on the trip.

    ``days`` defaults to the number of forecasts. Days without a forecast
    entry are planned without weather.
    """

    rng = rng or random.Random()
    settings = settings or DEFAULT_SETTINGS
    total_days = len(forecasts) if days is None else max(days, 0)
    pools = CategoryPools.from_items(items)
    if occasion:
        pools = pools.map(partial(filter_by_occasion, occasion=occasion))

    used: FrozenSet[str] = frozenset()
    planned: List[DayOutfit] = []
    for index in range(total_days):
        weather = forecasts[index] if index < len(forecasts) else None
        outfit, used = generate_day(pools, weather, used, rng=rng, settings=settings)
        planned.append(DayOutfit(day_number=index + 1, weather=weather, outfit=outfit))

    plan = TripPlan(days=planned, used_item_ids=used)
    logger.info(
        "Planned trip days=%s distinct_items=%s incomplete_days=%s",
        total_days,
        len(used),
        plan.incomplete_days,
    )
    return plan


__all__ = ["DayOutfit", "TripPlan", "generate_day", "plan_trip"]
