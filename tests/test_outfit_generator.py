"""Random outfit generation: path choice, weather rules and used-item variety."""

from __future__ import annotations

import random
import sys
from pathlib import Path
from typing import List

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.outfit_generator import CategoryPools, GeneratorSettings, generate_outfit
from models.outfit import Outfit
from models.wardrobe_item import WardrobeItem
from models.weather import Weather


def _items(category: str, count: int, prefix: str | None = None) -> List[WardrobeItem]:
    stem = prefix or category.lower()
    return [WardrobeItem(item_id=f"{stem}-{index}", category=category) for index in range(count)]


def _pools(**counts: int) -> CategoryPools:
    items: List[WardrobeItem] = []
    for category, count in counts.items():
        items.extend(_items(category, count))
    return CategoryPools.from_items(items)


FULL_POOLS = _pools(Top=3, Bottom=3, Shoes=3, Dress=3, Outerwear=2, Accessory=2)


def test_pools_partition_by_category_and_drop_unknown() -> None:
    items = _items("Top", 2) + _items("Shoes", 1) + [
        WardrobeItem(item_id="odd", category="Swimwear"),
        WardrobeItem(item_id="top-0", category="Dress"),
    ]
    pools = CategoryPools.from_items(items)
    assert [item.item_id for item in pools.tops] == ["top-0", "top-1"]
    assert pools.dresses == ()
    assert pools.sizes()["Shoes"] == 1


@pytest.mark.parametrize(
    "counts",
    [
        {"Top": 2, "Bottom": 2, "Shoes": 1},
        {"Dress": 2, "Shoes": 2},
        {"Dress": 1, "Top": 3, "Shoes": 1},
        {"Bottom": 1, "Dress": 1, "Shoes": 1},
        {"Top": 1, "Bottom": 1, "Dress": 1, "Shoes": 1, "Outerwear": 1, "Accessory": 1},
    ],
)
def test_satisfiable_pools_always_yield_complete_outfits(counts: dict) -> None:
    pools = _pools(**counts)
    rng = random.Random(5)
    for _ in range(200):
        assert generate_outfit(pools, rng=rng).is_complete


def test_path_choice_only_uses_non_empty_pools() -> None:
    rng = random.Random(17)
    no_dress = _pools(Top=2, Bottom=2, Shoes=2)
    for _ in range(100):
        outfit = generate_outfit(no_dress, rng=rng)
        assert outfit.dress is None
        assert outfit.top is not None and outfit.bottom is not None

    only_dress = _pools(Dress=2, Shoes=1)
    for _ in range(100):
        outfit = generate_outfit(only_dress, rng=rng)
        assert outfit.dress is not None
        assert outfit.top is None and outfit.bottom is None


def test_both_paths_appear_when_both_are_possible() -> None:
    rng = random.Random(23)
    outfits = [generate_outfit(FULL_POOLS, rng=rng) for _ in range(300)]
    assert any(outfit.dress is not None for outfit in outfits)
    assert any(outfit.top is not None for outfit in outfits)
    for outfit in outfits:
        assert (outfit.dress is None) != (outfit.top is None)


def test_every_eligible_item_is_eventually_drawn() -> None:
    rng = random.Random(29)
    seen = set()
    for _ in range(500):
        seen.update(generate_outfit(FULL_POOLS, rng=rng).item_ids())
    expected = {item.item_id for category in ("Top", "Bottom", "Shoes", "Dress") for item in FULL_POOLS.pool(category)}
    assert expected.issubset(seen)


def test_empty_pools_return_an_empty_outfit_without_raising() -> None:
    outfit = generate_outfit(CategoryPools(), weather=Weather(5.0, "Snow"), rng=random.Random(1))
    assert outfit == Outfit()
    assert outfit.is_empty
    assert not outfit.is_complete


def test_unsatisfiable_pools_leave_explicit_empty_slots() -> None:
    outfit = generate_outfit(_pools(Top=2, Bottom=1), rng=random.Random(2))
    assert outfit.top is not None and outfit.bottom is not None
    assert outfit.shoes is None
    assert not outfit.is_complete
    assert outfit.missing_core_categories() == ["Shoes"]
    assert outfit.as_dict()["shoes"] is None

    partial = generate_outfit(_pools(Top=1, Shoes=1), rng=random.Random(2))
    assert partial.bottom is None
    assert partial.missing_core_categories() == ["Bottom"]


def test_cold_weather_requires_outerwear_when_available() -> None:
    rng = random.Random(31)
    for _ in range(100):
        outfit = generate_outfit(FULL_POOLS, weather=Weather(temperature_celsius=4.0, condition="Clear"), rng=rng)
        assert outfit.outerwear is not None


def test_warm_dry_weather_omits_outerwear() -> None:
    rng = random.Random(37)
    for _ in range(100):
        outfit = generate_outfit(FULL_POOLS, weather=Weather(temperature_celsius=24.0, condition="Clear"), rng=rng)
        assert outfit.outerwear is None


@pytest.mark.parametrize(
    "weather",
    [
        Weather(temperature_celsius=15.0, condition="Clouds"),
        Weather(temperature_celsius=22.0, condition="Light Drizzle"),
        Weather(temperature_celsius=25.0, condition="Rain"),
        None,
    ],
)
def test_mild_rainy_or_unknown_weather_makes_outerwear_optional(weather: Weather | None) -> None:
    rng = random.Random(41)
    outfits = [generate_outfit(FULL_POOLS, weather=weather, rng=rng) for _ in range(200)]
    assert any(outfit.outerwear is not None for outfit in outfits)
    assert any(outfit.outerwear is None for outfit in outfits)


def test_outerwear_never_appears_without_a_pool() -> None:
    pools = _pools(Top=1, Bottom=1, Shoes=1)
    outfit = generate_outfit(pools, weather=Weather(temperature_celsius=0.0), rng=random.Random(3))
    assert outfit.outerwear is None
    assert outfit.is_complete


def test_accessory_is_an_occasional_extra() -> None:
    rng = random.Random(43)
    outfits = [generate_outfit(FULL_POOLS, rng=rng) for _ in range(300)]
    with_accessory = sum(outfit.accessory is not None for outfit in outfits)
    assert 0 < with_accessory < len(outfits)


def test_settings_can_force_paths_and_extras() -> None:
    always = GeneratorSettings(dress_probability=1.0, outerwear_probability=1.0, accessory_probability=1.0)
    never = GeneratorSettings(dress_probability=0.0, outerwear_probability=0.0, accessory_probability=0.0)
    rng = random.Random(47)
    for _ in range(50):
        forced = generate_outfit(FULL_POOLS, rng=rng, settings=always)
        assert forced.dress is not None and forced.outerwear is not None and forced.accessory is not None
        plain = generate_outfit(FULL_POOLS, rng=rng, settings=never)
        assert plain.dress is None and plain.outerwear is None and plain.accessory is None


def test_settings_reject_out_of_range_probabilities() -> None:
    with pytest.raises(ValueError):
        GeneratorSettings(dress_probability=1.5)
    with pytest.raises(ValueError):
        GeneratorSettings(cold_threshold_c=20.0, mild_threshold_c=18.0)


def test_used_items_are_avoided_with_per_pool_fallback() -> None:
    pools = _pools(Top=2, Bottom=1, Shoes=2)
    used = frozenset({"top-0", "bottom-0", "shoes-0", "shoes-1"})
    rng = random.Random(53)
    for _ in range(50):
        outfit = generate_outfit(pools, used_item_ids=used, rng=rng)
        assert outfit.top.item_id == "top-1"
        assert outfit.bottom.item_id == "bottom-0"
        assert outfit.shoes.item_id in {"shoes-0", "shoes-1"}
        assert outfit.is_complete


def test_seeded_generation_replays_identically() -> None:
    weather = Weather(temperature_celsius=14.0, condition="Rain")
    first = [generate_outfit(FULL_POOLS, weather=weather, rng=random.Random(99)) for _ in range(3)]
    second = [generate_outfit(FULL_POOLS, weather=weather, rng=random.Random(99)) for _ in range(3)]
    assert first == second


def test_generation_does_not_mutate_inputs() -> None:
    items = _items("Top", 2) + _items("Bottom", 2) + _items("Shoes", 2)
    snapshot = list(items)
    used = {"top-0"}
    pools = CategoryPools.from_items(items)
    generate_outfit(pools, used_item_ids=used, rng=random.Random(4))
    assert items == snapshot
    assert used == {"top-0"}
