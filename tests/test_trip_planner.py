"""Trip planning fold and occasion filtering."""

from __future__ import annotations

import random
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.occasion_filter import filter_by_occasion
from logic.outfit_generator import CategoryPools
from logic.trip_planner import generate_day, plan_trip
from models.wardrobe_item import WardrobeItem
from models.weather import Weather


def _item(item_id: str, category: str, analysis: str | None = None) -> WardrobeItem:
    return WardrobeItem(item_id=item_id, category=category, ai_analysis=analysis)


TRIP_WARDROBE = [
    _item("t1", "Top", "casual cotton t-shirt"),
    _item("t2", "Top", "relaxed linen shirt"),
    _item("t3", "Top", "formal silk blouse"),
    _item("b1", "Bottom", "everyday jeans"),
    _item("b2", "Bottom", "comfortable chinos, casual"),
    _item("s1", "Shoes", "casual sneakers"),
    _item("s2", "Shoes", "comfortable loafers"),
    _item("s3", "Shoes", "relaxed sandals"),
]


def test_generate_day_returns_new_used_set_without_mutation() -> None:
    pools = CategoryPools.from_items(TRIP_WARDROBE)
    used = frozenset({"t1"})
    outfit, updated = generate_day(pools, None, used, rng=random.Random(1))
    assert used == frozenset({"t1"})
    assert updated == used | frozenset(outfit.item_ids())
    assert outfit.top.item_id != "t1"


def test_plan_trip_spreads_items_across_days() -> None:
    plan = plan_trip(TRIP_WARDROBE, days=3, rng=random.Random(2))
    assert [day.day_number for day in plan.days] == [1, 2, 3]
    tops = [day.outfit.top.item_id for day in plan.days]
    shoes = [day.outfit.shoes.item_id for day in plan.days]
    assert len(set(tops)) == 3
    assert len(set(shoes)) == 3
    assert plan.incomplete_days == []


def test_plan_trip_reuses_items_once_a_pool_is_exhausted() -> None:
    plan = plan_trip(TRIP_WARDROBE, days=5, rng=random.Random(3))
    assert len(plan.days) == 5
    assert all(day.outfit.is_complete for day in plan.days)
    assert {"b1", "b2"} <= plan.used_item_ids


def test_plan_trip_uses_forecasts_per_day() -> None:
    wardrobe = TRIP_WARDROBE + [_item("coat", "Outerwear", "casual wool coat")]
    forecasts = [Weather(temperature_celsius=3.0, condition="Snow"), Weather(temperature_celsius=26.0, condition="Clear")]
    plan = plan_trip(wardrobe, forecasts=forecasts, days=3, rng=random.Random(4))
    assert plan.days[0].weather == forecasts[0]
    assert plan.days[0].outfit.outerwear is not None
    assert plan.days[1].outfit.outerwear is None
    assert plan.days[2].weather is None


def test_plan_trip_days_default_to_forecast_count() -> None:
    forecasts = [Weather(20.0, "Clear")] * 2
    assert len(plan_trip(TRIP_WARDROBE, forecasts=forecasts, rng=random.Random(5)).days) == 2
    assert plan_trip(TRIP_WARDROBE, rng=random.Random(5)).days == []


def test_plan_trip_reports_incomplete_days() -> None:
    plan = plan_trip([_item("t1", "Top")], days=2, rng=random.Random(6))
    assert plan.incomplete_days == [1, 2]


def test_plan_trip_applies_occasion_filter() -> None:
    plan = plan_trip(TRIP_WARDROBE, days=4, occasion="formal", rng=random.Random(7))
    # Only t3 matches "formal" among tops; the other pools fall back to everything.
    assert {day.outfit.top.item_id for day in plan.days} == {"t3"}


def test_filter_by_occasion_keywords_and_fallback() -> None:
    tops = [item for item in TRIP_WARDROBE if item.category == "Top"]
    assert [item.item_id for item in filter_by_occasion(tops, "casual")] == ["t1", "t2"]
    assert [item.item_id for item in filter_by_occasion(tops, "evening")] == ["t3"]
    unlabelled = [_item("x1", "Top"), _item("x2", "Top", "plain grey knit")]
    assert filter_by_occasion(unlabelled, "beach") == unlabelled
    assert [item.item_id for item in filter_by_occasion(tops, "unheard-of")] == ["t1", "t2"]
    assert filter_by_occasion([], "work") == []
