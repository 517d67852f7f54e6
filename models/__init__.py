"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.outfit import Outfit
from models.wardrobe_item import WardrobeItem, from_raw_metadata
from models.weather import Weather

__all__ = ["Outfit", "WardrobeItem", "Weather", "from_raw_metadata"]
