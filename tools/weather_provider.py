"""Weather provider abstractions and implementations."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

import requests
from pydantic import BaseModel, Field, ValidationError

from models.weather import Weather
from tools.observability import instrument_call


LOGGER = logging.getLogger(__name__)

CURRENT_URL = "https://api.openweathermap.org/data/2.5/weather"
FORECAST_URL = "https://api.openweathermap.org/data/2.5/forecast"
# The free forecast tier only covers five days.
MAX_FORECAST_DAYS = 5


class CurrentWeatherInput(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)


class ForecastInput(CurrentWeatherInput):
    days: int = Field(default=MAX_FORECAST_DAYS, ge=1, le=14)


class _WeatherCondition(BaseModel):
    main: str = "unknown"
    description: str = "unknown"


class _Main(BaseModel):
    temp: float


class _CurrentResponse(BaseModel):
    main: _Main
    weather: List[_WeatherCondition] = []
    name: str = ""


class _ForecastEntry(BaseModel):
    dt_txt: str
    main: _Main
    weather: List[_WeatherCondition] = []


class _ForecastResponse(BaseModel):
    list: List[_ForecastEntry] = []


def _to_weather(main: _Main, conditions: List[_WeatherCondition]) -> Weather:
    condition = conditions[0].main if conditions else None
    return Weather(temperature_celsius=float(round(main.temp)), condition=condition)


def daily_forecasts(entries: List[_ForecastEntry], days: int) -> List[Weather]:
    """Collapse three-hourly entries into one reading per date, midday preferred."""

    by_date: Dict[str, _ForecastEntry] = {}
    for entry in entries:
        day = entry.dt_txt.split(" ")[0]
        if day not in by_date:
            if len(by_date) >= days:
                continue
            by_date[day] = entry
        if "12:00:00" in entry.dt_txt:
            by_date[day] = entry
    return [_to_weather(entry.main, entry.weather) for entry in by_date.values()]


class WeatherProvider(ABC):
    """Abstract weather provider interface."""

    @abstractmethod
    def get_current(self, lat: float, lon: float) -> Optional[Weather]:
        """Return current conditions, or ``None`` when unavailable."""

    @abstractmethod
    def get_forecast(self, lat: float, lon: float, days: int = MAX_FORECAST_DAYS) -> List[Weather]:
        """Return one reading per day, possibly fewer than requested."""


class OpenWeatherProvider(WeatherProvider):
    """OpenWeatherMap provider with schema validation and graceful fallbacks.

    Bad coordinates raise ``ValueError``. Transport and payload problems are
    logged and reported as missing weather so outfit generation can proceed.
    """

    def __init__(self, api_key: str | None = None, timeout_seconds: float = 5.0, units: str = "metric") -> None:
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self.units = units

    def _get(self, url: str, lat: float, lon: float) -> dict:
        params = {"lat": lat, "lon": lon, "appid": self.api_key, "units": self.units}
        response = requests.get(url, params=params, timeout=self.timeout_seconds)
        response.raise_for_status()
        return response.json()

    def get_current(self, lat: float, lon: float) -> Optional[Weather]:
        return self._fetch_current(lat=lat, lon=lon)

    def get_forecast(self, lat: float, lon: float, days: int = MAX_FORECAST_DAYS) -> List[Weather]:
        return self._fetch_forecast(lat=lat, lon=lon, days=days)

    @instrument_call("weather.current", input_model=CurrentWeatherInput)
    def _fetch_current(self, *, lat: float, lon: float) -> Optional[Weather]:
        if not self.api_key:
            LOGGER.warning("Weather lookup skipped", extra={"reason": "missing_api_key"})
            return None
        try:
            parsed = _CurrentResponse.model_validate(self._get(CURRENT_URL, lat, lon))
        except requests.RequestException as exc:
            LOGGER.error("Weather API unreachable", exc_info=exc)
            return None
        except ValidationError as exc:
            LOGGER.error("Weather payload schema validation failed", exc_info=exc)
            return None
        return _to_weather(parsed.main, parsed.weather)

    @instrument_call("weather.forecast", input_model=ForecastInput)
    def _fetch_forecast(self, *, lat: float, lon: float, days: int = MAX_FORECAST_DAYS) -> List[Weather]:
        if not self.api_key:
            LOGGER.warning("Forecast lookup skipped", extra={"reason": "missing_api_key"})
            return []
        try:
            parsed = _ForecastResponse.model_validate(self._get(FORECAST_URL, lat, lon))
        except requests.RequestException as exc:
            LOGGER.error("Forecast API unreachable", exc_info=exc)
            return []
        except ValidationError as exc:
            LOGGER.error("Forecast payload schema validation failed", exc_info=exc)
            return []
        return daily_forecasts(parsed.list, min(days, MAX_FORECAST_DAYS))


class MockWeatherProvider(WeatherProvider):
    """Offline deterministic weather provider for tests."""

    def __init__(self, current: Weather | None = None, forecast: List[Weather] | None = None) -> None:
        self.current = current or Weather(temperature_celsius=15.0, condition="Clear")
        self.forecast = list(forecast) if forecast is not None else [self.current]

    def get_current(self, lat: float, lon: float) -> Optional[Weather]:
        LOGGER.info("Returning mock weather")
        return self.current

    def get_forecast(self, lat: float, lon: float, days: int = MAX_FORECAST_DAYS) -> List[Weather]:
        LOGGER.info("Returning mock forecast", extra={"days": days})
        return self.forecast[:days]


__all__ = [
    "CurrentWeatherInput",
    "ForecastInput",
    "MAX_FORECAST_DAYS",
    "MockWeatherProvider",
    "OpenWeatherProvider",
    "WeatherProvider",
    "daily_forecasts",
]
