"""Kikonasu app bootstrap."""

from __future__ import annotations

import logging
import random
import uuid
from collections import OrderedDict
from typing import Dict, List, Mapping, Optional, Sequence

from kikonasu_app.config import KikonasuConfig
from kikonasu_app.logging_config import configure_logging, get_logger, log_event, operation_context
from logic.capsule_math import GapSuggestion, outfit_potential, summarize_capsule
from logic.capsule_templates import (
    BUILTIN_TEMPLATES,
    CapsuleTemplate,
    TemplateMatch,
    completion_percentage,
    find_template,
    match_template,
    missing_budget,
    recommend_templates,
)
from logic.outfit_generator import CategoryPools, generate_outfit
from logic.outfit_session import OutfitSession
from logic.trip_planner import plan_trip
from models.outfit import Outfit
from models.taxonomy import CATEGORIES, slot_name
from models.wardrobe_item import WardrobeItem
from models.weather import Weather
from tools.weather_provider import OpenWeatherProvider, WeatherProvider


LOGGER = get_logger(__name__)

NEEDS_MORE_ITEMS_MESSAGE = "Add more items to your wardrobe: an outfit needs shoes plus a dress or a top and a bottom."


def serialize_item(item: Optional[WardrobeItem]) -> Optional[dict]:
    if item is None:
        return None
    return {"id": item.item_id, "category": item.category, "image_url": item.image_ref}


def serialize_outfit(outfit: Outfit) -> Dict[str, Optional[dict]]:
    return {slot_name(category): serialize_item(outfit.slot(category)) for category in CATEGORIES}


def serialize_weather(weather: Optional[Weather]) -> Optional[dict]:
    if weather is None:
        return None
    return {"temperature": weather.temperature_celsius, "condition": weather.condition}


def _serialize_suggestion(suggestion: GapSuggestion) -> dict:
    return {
        "item": serialize_item(suggestion.item),
        "outfit_increase": suggestion.outfit_increase,
        "new_total": suggestion.new_total,
    }


def _serialize_template_match(match: TemplateMatch) -> dict:
    return {
        "template_item_id": match.template_item.template_item_id,
        "item": serialize_item(match.wardrobe_item),
        "score": match.score,
        "reason": match.reason,
        "manual": match.manual,
    }


def outfit_response(outfit: Outfit, **extra: object) -> dict:
    """Wrap an outfit, flagging incomplete ones so they are never persisted."""

    response: dict = {"outfit": serialize_outfit(outfit), "complete": outfit.is_complete, **extra}
    if outfit.is_complete:
        response["status"] = "ok"
    else:
        response["status"] = "needs_more_items"
        response["message"] = NEEDS_MORE_ITEMS_MESSAGE
        response["missing"] = outfit.missing_core_categories()
    return response


class KikonasuApp:
    """Wires configuration, weather lookups and the outfit engines together."""

    def __init__(
        self,
        config: KikonasuConfig | None = None,
        weather_provider: WeatherProvider | None = None,
        rng: random.Random | None = None,
        templates: Sequence[CapsuleTemplate] | None = None,
    ) -> None:
        self.config = config or KikonasuConfig.from_env()
        configure_logging(self.config.log_level)
        self.settings = self.config.generator_settings()
        self.weather_provider = weather_provider or OpenWeatherProvider(
            api_key=self.config.weather_api_key,
            timeout_seconds=self.config.weather_timeout_seconds,
            units=self.config.weather_units,
        )
        self.rng = rng or random.Random()
        self.templates: Sequence[CapsuleTemplate] = templates if templates is not None else BUILTIN_TEMPLATES
        self._sessions: "OrderedDict[str, OutfitSession]" = OrderedDict()

    def _lookup_weather(self, lat: float | None, lon: float | None) -> Optional[Weather]:
        if lat is None or lon is None:
            return None
        return self.weather_provider.get_current(lat=lat, lon=lon)

    def todays_look(
        self,
        items: Sequence[WardrobeItem],
        weather: Weather | None = None,
        used_item_ids: Sequence[str] = (),
        lat: float | None = None,
        lon: float | None = None,
    ) -> dict:
        """Generate a one-off outfit for today."""

        with operation_context("app:todays_look") as correlation_id:
            weather = weather or self._lookup_weather(lat, lon)
            outfit = generate_outfit(
                CategoryPools.from_items(items),
                weather=weather,
                used_item_ids=frozenset(used_item_ids),
                rng=self.rng,
                settings=self.settings,
            )
            log_event(
                LOGGER,
                level=logging.INFO,
                event="app_call_completed",
                method="todays_look",
                correlation_id=correlation_id,
                item_count=len(items),
                complete=outfit.is_complete,
            )
            return outfit_response(outfit, weather=serialize_weather(weather))

    def start_session(self, items: Sequence[WardrobeItem], weather: Weather | None = None) -> dict:
        """Create an editing session, generate its first outfit and return both.

        A wardrobe that cannot produce a complete outfit gets no session.
        """

        session = OutfitSession(items, weather=weather, rng=self.rng, settings=self.settings)
        outfit = session.generate()
        if not outfit.is_complete:
            log_event(LOGGER, logging.INFO, "session_rejected", item_count=len(items))
            return outfit_response(outfit)

        session_id = uuid.uuid4().hex
        self._sessions[session_id] = session
        while len(self._sessions) > self.config.max_sessions:
            evicted_id, _ = self._sessions.popitem(last=False)
            log_event(LOGGER, logging.INFO, "session_evicted", session_id=evicted_id)
        log_event(LOGGER, logging.INFO, "session_started", session_id=session_id, item_count=len(items))
        return outfit_response(outfit, session_id=session_id, locked=[])

    @property
    def session_count(self) -> int:
        return len(self._sessions)

    def get_session(self, session_id: str) -> Optional[OutfitSession]:
        session = self._sessions.get(session_id)
        if session is not None:
            self._sessions.move_to_end(session_id)
        return session

    def _session_response(self, session_id: str, session: OutfitSession) -> dict:
        outfit = session.outfit or Outfit()
        return outfit_response(
            outfit,
            session_id=session_id,
            locked=sorted(session.locked, key=CATEGORIES.index),
            can_shuffle=session.can_shuffle,
        )

    @staticmethod
    def _missing_session(session_id: str) -> dict:
        return {"status": "not_found", "message": f"Unknown session '{session_id}'"}

    def regenerate(self, session_id: str) -> dict:
        session = self.get_session(session_id)
        if session is None:
            return self._missing_session(session_id)
        session.generate()
        return self._session_response(session_id, session)

    def shuffle(self, session_id: str, locked: Sequence[str] | None = None) -> dict:
        session = self.get_session(session_id)
        if session is None:
            return self._missing_session(session_id)
        session.shuffle(None if locked is None else frozenset(locked))
        return self._session_response(session_id, session)

    def toggle_lock(self, session_id: str, category: str) -> dict:
        session = self.get_session(session_id)
        if session is None:
            return self._missing_session(session_id)
        session.toggle_lock(category)
        return self._session_response(session_id, session)

    def unlock_all(self, session_id: str) -> dict:
        session = self.get_session(session_id)
        if session is None:
            return self._missing_session(session_id)
        session.unlock_all()
        return self._session_response(session_id, session)

    def remove_item(self, session_id: str, category: str) -> dict:
        session = self.get_session(session_id)
        if session is None:
            return self._missing_session(session_id)
        session.remove_item(category)
        return self._session_response(session_id, session)

    def end_session(self, session_id: str) -> bool:
        ended = self._sessions.pop(session_id, None) is not None
        if ended:
            log_event(LOGGER, logging.INFO, "session_ended", session_id=session_id)
        return ended

    def capsule_summary(self, selected: Sequence[WardrobeItem], wardrobe: Sequence[WardrobeItem]) -> dict:
        """Outfit totals for a capsule plus the items that would grow it most."""

        summary = summarize_capsule(
            selected,
            wardrobe,
            min_items=self.config.min_capsule_items,
            max_suggestions=self.config.max_gap_suggestions,
        )
        response = {
            "status": "ok",
            "item_count": summary.item_count,
            "total_outfits": summary.total_outfits,
            "breakdown": summary.breakdown,
            "ready": summary.ready,
            "suggestions": [_serialize_suggestion(suggestion) for suggestion in summary.suggestions],
        }
        if not summary.ready:
            response["message"] = f"Select at least {self.config.min_capsule_items} items to build a capsule."
        return response

    def outfit_potential(self, category: str, wardrobe: Sequence[WardrobeItem]) -> dict:
        return {"status": "ok", "category": category, "outfit_potential": outfit_potential(category, wardrobe)}

    def recommend_templates(self, wardrobe: Sequence[WardrobeItem]) -> dict:
        """Capsule templates ranked by fit with the wardrobe."""

        ranked = recommend_templates(wardrobe, self.templates)
        return {
            "status": "ok",
            "templates": [
                {
                    "template_id": recommendation.template.template_id,
                    "name": recommendation.template.name,
                    "score": recommendation.score,
                    "match_percentage": recommendation.match_percentage,
                }
                for recommendation in ranked
            ],
        }

    def match_template(
        self,
        template_id: str,
        wardrobe: Sequence[WardrobeItem],
        manual_matches: Mapping[str, str] | None = None,
    ) -> dict:
        """Owned, roughly owned and missing template items, with the cost of the gaps.

        ``manual_matches`` maps template item ids to wardrobe item ids; ids not
        in the wardrobe are ignored.
        """

        template = find_template(template_id, self.templates)
        if template is None:
            return {"status": "not_found", "message": f"Unknown template '{template_id}'"}

        by_id = {item.item_id: item for item in reversed(wardrobe)}
        pinned = {
            template_item_id: by_id[item_id]
            for template_item_id, item_id in (manual_matches or {}).items()
            if item_id in by_id
        }
        with operation_context("app:match_template"):
            match = match_template(wardrobe, template, manual_matches=pinned)
            return {
                "status": "ok",
                "template_id": template.template_id,
                "exact": [_serialize_template_match(entry) for entry in match.exact],
                "similar": [_serialize_template_match(entry) for entry in match.similar],
                "missing": [entry.template_item_id for entry in match.missing],
                "completion_percentage": completion_percentage(match, template),
                "budget": missing_budget(match.missing),
            }

    def plan_trip(
        self,
        items: Sequence[WardrobeItem],
        days: int,
        occasion: str | None = None,
        forecasts: Sequence[Optional[Weather]] | None = None,
        lat: float | None = None,
        lon: float | None = None,
    ) -> dict:
        """Plan one outfit per trip day, using a forecast lookup when coordinates are given."""

        with operation_context("app:plan_trip") as correlation_id:
            if forecasts is None:
                forecasts = []
                if lat is not None and lon is not None:
                    forecasts = self.weather_provider.get_forecast(lat=lat, lon=lon, days=days)
            plan = plan_trip(
                items,
                forecasts=list(forecasts),
                days=days,
                occasion=occasion,
                rng=self.rng,
                settings=self.settings,
            )
            day_payloads: List[dict] = [
                {"day_number": day.day_number, "weather": serialize_weather(day.weather), **outfit_response(day.outfit)}
                for day in plan.days
            ]
            log_event(
                LOGGER,
                level=logging.INFO,
                event="app_call_completed",
                method="plan_trip",
                correlation_id=correlation_id,
                days=days,
                incomplete_days=plan.incomplete_days,
            )
            response = {
                "status": "ok" if not plan.incomplete_days else "needs_more_items",
                "days": day_payloads,
                "distinct_items": len(plan.used_item_ids),
            }
            if plan.incomplete_days:
                response["message"] = NEEDS_MORE_ITEMS_MESSAGE
            return response


__all__ = ["KikonasuApp", "NEEDS_MORE_ITEMS_MESSAGE", "outfit_response", "serialize_outfit"]
