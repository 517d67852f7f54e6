"""Weather provider parsing, validation and fallbacks."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, List

import pytest
import requests

sys.path.append(str(Path(__file__).resolve().parents[1]))

from models.weather import Weather
from tools import weather_provider
from tools.weather_provider import MockWeatherProvider, OpenWeatherProvider


class _FakeResponse:
    def __init__(self, payload: Dict[str, Any], status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"status {self.status_code}")

    def json(self) -> Dict[str, Any]:
        return self._payload


def _forecast_entry(dt_txt: str, temp: float, condition: str) -> Dict[str, Any]:
    return {"dt_txt": dt_txt, "main": {"temp": temp}, "weather": [{"main": condition, "description": condition.lower()}]}


def _install_get(monkeypatch: pytest.MonkeyPatch, response: Any, calls: List[dict] | None = None) -> None:
    def fake_get(url: str, params: dict, timeout: float) -> Any:
        if calls is not None:
            calls.append({"url": url, "params": params, "timeout": timeout})
        if isinstance(response, Exception):
            raise response
        return response

    monkeypatch.setattr(weather_provider.requests, "get", fake_get)


def test_current_weather_is_parsed_and_rounded(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: List[dict] = []
    payload = {"main": {"temp": 11.6}, "weather": [{"main": "Rain", "description": "light rain"}], "name": "Oslo"}
    _install_get(monkeypatch, _FakeResponse(payload), calls)

    provider = OpenWeatherProvider(api_key="key", timeout_seconds=2.0)
    weather = provider.get_current(lat=59.9, lon=10.7)

    assert weather == Weather(temperature_celsius=12.0, condition="Rain")
    assert calls[0]["url"] == weather_provider.CURRENT_URL
    assert calls[0]["params"]["units"] == "metric"
    assert calls[0]["timeout"] == 2.0


def test_forecast_prefers_midday_and_caps_days(monkeypatch: pytest.MonkeyPatch) -> None:
    entries = []
    for day in range(1, 8):
        entries.append(_forecast_entry(f"2025-03-0{day} 09:00:00", 5.0 + day, "Clouds"))
        entries.append(_forecast_entry(f"2025-03-0{day} 12:00:00", 10.0 + day, "Clear"))
    _install_get(monkeypatch, _FakeResponse({"list": entries, "city": {"name": "Oslo"}}))

    provider = OpenWeatherProvider(api_key="key")
    forecast = provider.get_forecast(lat=59.9, lon=10.7, days=7)

    assert len(forecast) == 5
    assert forecast[0] == Weather(temperature_celsius=11.0, condition="Clear")
    assert forecast[-1].temperature_celsius == 15.0


def test_forecast_without_midday_entry_uses_first_of_day() -> None:
    entries = [
        weather_provider._ForecastEntry.model_validate(_forecast_entry("2025-03-01 18:00:00", 7.4, "Rain")),
        weather_provider._ForecastEntry.model_validate(_forecast_entry("2025-03-01 21:00:00", 5.0, "Clear")),
    ]
    assert weather_provider.daily_forecasts(entries, 3) == [Weather(temperature_celsius=7.0, condition="Rain")]


def test_missing_api_key_skips_lookup(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: List[dict] = []
    _install_get(monkeypatch, _FakeResponse({}), calls)
    provider = OpenWeatherProvider(api_key=None)
    assert provider.get_current(lat=1.0, lon=1.0) is None
    assert provider.get_forecast(lat=1.0, lon=1.0, days=2) == []
    assert calls == []


def test_network_errors_fall_back_to_no_weather(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_get(monkeypatch, requests.Timeout("slow"))
    provider = OpenWeatherProvider(api_key="key")
    assert provider.get_current(lat=1.0, lon=1.0) is None
    assert provider.get_forecast(lat=1.0, lon=1.0) == []


def test_http_errors_fall_back_to_no_weather(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_get(monkeypatch, _FakeResponse({}, status_code=500))
    assert OpenWeatherProvider(api_key="key").get_current(lat=1.0, lon=1.0) is None


def test_schema_errors_fall_back_to_no_weather(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_get(monkeypatch, _FakeResponse({"weather": []}))
    assert OpenWeatherProvider(api_key="key").get_current(lat=1.0, lon=1.0) is None


@pytest.mark.parametrize(
    "kwargs",
    [
        {"lat": 91.0, "lon": 0.0},
        {"lat": 0.0, "lon": -181.0},
        {"lat": 0.0, "lon": 0.0, "days": 15},
        {"lat": 0.0, "lon": 0.0, "days": 0},
    ],
)
def test_invalid_coordinates_are_rejected(kwargs: dict) -> None:
    provider = OpenWeatherProvider(api_key="key")
    with pytest.raises(ValueError):
        provider.get_forecast(**kwargs)


def test_mock_provider_is_deterministic() -> None:
    forecast = [Weather(5.0, "Snow"), Weather(8.0, "Rain"), Weather(20.0, "Clear")]
    provider = MockWeatherProvider(current=Weather(9.0, "Clouds"), forecast=forecast)
    assert provider.get_current(lat=0.0, lon=0.0) == Weather(9.0, "Clouds")
    assert provider.get_forecast(lat=0.0, lon=0.0, days=2) == forecast[:2]
