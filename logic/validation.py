"""Pydantic schemas and helpers for validating requests at the app boundary."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from models.taxonomy import validate_category
from models.wardrobe_item import WardrobeItem
from models.weather import Weather


class WardrobeItemPayload(BaseModel):
    """Wardrobe row as delivered by the store; unknown categories pass through."""

    id: str = Field(min_length=1)
    category: str
    image_url: str = ""
    ai_analysis: Optional[str] = None
    color: Optional[str] = None
    description: Optional[str] = None

    def to_item(self) -> WardrobeItem:
        extra = {key: value for key, value in (("color", self.color), ("description", self.description)) if value}
        return WardrobeItem(
            item_id=self.id,
            category=self.category,
            image_ref=self.image_url,
            ai_analysis=self.ai_analysis,
            extra=extra,
        )


class WeatherPayload(BaseModel):
    temperature: Optional[float] = None
    condition: Optional[str] = None

    def to_weather(self) -> Weather:
        return Weather(temperature_celsius=self.temperature, condition=self.condition)


class GenerateOutfitRequest(BaseModel):
    items: List[WardrobeItemPayload] = []
    weather: Optional[WeatherPayload] = None
    used_item_ids: List[str] = []


class SessionRequest(BaseModel):
    items: List[WardrobeItemPayload] = []
    weather: Optional[WeatherPayload] = None


class ShuffleRequest(BaseModel):
    locked: Optional[List[str]] = None

    @field_validator("locked")
    @classmethod
    def _validate_locked(cls, locked: Optional[List[str]]) -> Optional[List[str]]:
        if locked is None:
            return None
        return [validate_category(category) for category in locked]


class CapsuleRequest(BaseModel):
    selected: List[WardrobeItemPayload] = []
    wardrobe: List[WardrobeItemPayload] = []


class PotentialRequest(BaseModel):
    category: str
    wardrobe: List[WardrobeItemPayload] = []

    @field_validator("category")
    @classmethod
    def _validate_category(cls, category: str) -> str:
        return validate_category(category)


class TemplateRecommendRequest(BaseModel):
    wardrobe: List[WardrobeItemPayload] = []


class TemplateMatchRequest(BaseModel):
    """Wardrobe to match, plus template item ids pinned to wardrobe item ids."""

    wardrobe: List[WardrobeItemPayload] = []
    manual_matches: Dict[str, str] = {}


class TripRequest(BaseModel):
    items: List[WardrobeItemPayload] = []
    days: int = Field(ge=1, le=14)
    occasion: Optional[str] = None
    forecasts: Optional[List[Optional[WeatherPayload]]] = None
    lat: Optional[float] = Field(default=None, ge=-90, le=90)
    lon: Optional[float] = Field(default=None, ge=-180, le=180)


__all__ = [
    "CapsuleRequest",
    "GenerateOutfitRequest",
    "PotentialRequest",
    "SessionRequest",
    "ShuffleRequest",
    "TemplateMatchRequest",
    "TemplateRecommendRequest",
    "TripRequest",
    "WardrobeItemPayload",
    "WeatherPayload",
]
