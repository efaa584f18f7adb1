from __future__ import annotations

# ruff: noqa: S101
from dataclasses import replace
from typing import Any

import pytest
from django.test import Client

from weather.engines.types import (
    NOT_AVAILABLE,
    CurrentWeather,
    ForecastEntry,
    WeatherReport,
    Wind,
)
from weather.exceptions import NotFoundError, UpstreamError
from weather.services import get_weather_by_query

from .fakes import FakeProvider, current_payload

REPORT = WeatherReport(
    current=CurrentWeather(
        location="Austin, TX, United States",
        temperature=72,
        feels_like=71,
        temp_min=68,
        temp_max=75,
        humidity=40,
        pressure_inhg="29.91",
        wind=Wind(speed=NOT_AVAILABLE, deg=NOT_AVAILABLE),
        rain=0,
        clouds=NOT_AVAILABLE,
        weather_icon="01d",
        weather_description="clear sky",
    ),
    forecast=[
        ForecastEntry(
            date="Mon, Jan 6", temp=61, icon="02d", description="few"
        ),
    ],
)


def _fake_by_ip(result: WeatherReport | Exception) -> Any:
    async def fake_get_weather_by_ip() -> WeatherReport:
        if isinstance(result, Exception):
            raise result
        return result

    return fake_get_weather_by_ip


def test_index_renders_report(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "weather.views.get_weather_by_ip", _fake_by_ip(REPORT)
    )
    resp = Client().get("/")
    assert resp.status_code == 200
    assert resp.context["error"] is None
    assert resp.context["weatherData"] == REPORT.current
    assert resp.context["forecastData"] == list(REPORT.forecast)
    body = resp.content.decode()
    assert "Austin, TX, United States" in body
    assert "29.91 inHg" in body
    assert "Mon, Jan 6" in body


def test_index_upstream_failure_renders_error_with_500(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(
        "weather.views.get_weather_by_ip",
        _fake_by_ip(UpstreamError("ipapi down")),
    )
    resp = Client().get("/")
    assert resp.status_code == 500
    assert resp.context["error"] == "ipapi down"
    assert resp.context["weatherData"] is None
    assert resp.context["forecastData"] == []


def test_search_blank_location_renders_validation_message(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    provider = FakeProvider()
    calls: list[str] = []

    async def fake_get_weather_by_query(raw: str) -> WeatherReport:
        calls.append(raw)
        return await get_weather_by_query(raw, provider)

    monkeypatch.setattr(
        "weather.views.get_weather_by_query", fake_get_weather_by_query
    )
    resp = Client().get("/search", {"location": "   "})
    assert resp.status_code == 200
    assert resp.context["error"] == "Please enter a location."
    assert resp.context["weatherData"] is None
    assert provider.calls == []

    resp = Client().get("/search")
    assert resp.status_code == 200
    assert resp.context["error"] == "Please enter a location."
    assert calls == ["   ", ""]
    assert provider.calls == []


def test_search_not_found_returns_404_without_weather_calls(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    provider = FakeProvider(matches=[])

    async def fake_get_weather_by_query(raw: str) -> WeatherReport:
        return await get_weather_by_query(raw, provider)

    monkeypatch.setattr(
        "weather.views.get_weather_by_query", fake_get_weather_by_query
    )
    resp = Client().get("/search", {"location": "Atlantis"})
    assert resp.status_code == 404
    assert "No location found" in resp.context["error"]
    assert resp.context["query"] == "Atlantis"
    assert provider.calls == [("geocode", "Atlantis")]


def test_search_success_uses_geocoded_location(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    provider = FakeProvider(
        matches=[
            {"name": "Paris", "lat": 48.85, "lon": 2.35, "country": "FR"}
        ]
    )

    async def fake_get_weather_by_query(raw: str) -> WeatherReport:
        return await get_weather_by_query(raw, provider)

    monkeypatch.setattr(
        "weather.views.get_weather_by_query", fake_get_weather_by_query
    )
    resp = Client().get("/search", {"location": "Paris,,FR"})
    assert resp.status_code == 200
    assert resp.context["error"] is None
    assert resp.context["weatherData"].location == "Paris, FR"
    assert len(resp.context["forecastData"]) == 5
    assert provider.calls[0] == ("geocode", "Paris,FR")


def test_api_report_success_envelope(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    captured: dict[str, object] = {}

    async def fake_get_weather_by_query(raw: str) -> WeatherReport:
        captured["location"] = raw
        return REPORT

    monkeypatch.setattr(
        "weather.views.get_weather_by_query", fake_get_weather_by_query
    )
    resp = Client().get("/api/v1/weather/", {"location": "Austin, TX"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == 0
    assert body["errors"] is None
    current = body["data"]["current"]
    assert current["temperature"] == 72
    assert current["pressure_inhg"] == "29.91"
    assert current["wind"] == {"speed": "N/A", "deg": "N/A"}
    assert current["clouds"] == "N/A"
    assert body["data"]["forecast"][0]["date"] == "Mon, Jan 6"
    assert captured["location"] == "Austin, TX"


def test_api_without_location_uses_ip(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(
        "weather.views.get_weather_by_ip", _fake_by_ip(REPORT)
    )
    resp = Client().get("/api/v1/weather/")
    assert resp.status_code == 200
    assert resp.json()["data"]["current"]["location"] == (
        "Austin, TX, United States"
    )


@pytest.mark.parametrize(
    ("error", "status_code"),
    [
        (NotFoundError("No location found for 'Atlantis'."), 404),
        (UpstreamError("forecast down"), 500),
    ],
)
def test_api_errors_use_error_envelope(
    monkeypatch: pytest.MonkeyPatch, error: Exception, status_code: int
) -> None:
    async def fake_get_weather_by_query(raw: str) -> WeatherReport:
        raise error

    monkeypatch.setattr(
        "weather.views.get_weather_by_query", fake_get_weather_by_query
    )
    resp = Client().get("/api/v1/weather/", {"location": "Atlantis"})
    assert resp.status_code == status_code
    body = resp.json()
    assert body["status"] == 1
    assert body["data"] is None
    assert body["message"] == str(error)


def test_api_blank_location_is_400() -> None:
    resp = Client().get("/api/v1/weather/", {"location": " "})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Please enter a location."


def test_search_malformed_upstream_body_renders_error_with_500(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    payload = current_payload()
    del payload["weather"]
    provider = FakeProvider(
        current=payload,
        matches=[
            {"name": "Paris", "lat": 48.85, "lon": 2.35, "country": "FR"}
        ],
    )

    async def fake_get_weather_by_query(raw: str) -> WeatherReport:
        return await get_weather_by_query(raw, provider)

    monkeypatch.setattr(
        "weather.views.get_weather_by_query", fake_get_weather_by_query
    )
    resp = Client().get("/search", {"location": "Paris"})
    assert resp.status_code == 500
    assert resp.context is not None
    assert resp.context["error"] == "Malformed current conditions payload"
    assert resp.context["weatherData"] is None
    assert resp.context["query"] == "Paris"
    assert "weather/index.html" in [t.name for t in resp.templates]


def test_index_shows_sentinels_without_units(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(
        "weather.views.get_weather_by_ip", _fake_by_ip(REPORT)
    )
    body = Client().get("/").content.decode()
    assert "N/A mph" not in body
    assert "N/A&deg;" not in body
    assert "N/A%" not in body
    assert "<dt>Wind</dt><dd>N/A</dd>" in body
    assert "<dt>Clouds</dt><dd>N/A</dd>" in body


def test_index_shows_units_for_numeric_wind_and_clouds(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    report = WeatherReport(
        current=replace(
            REPORT.current, wind=Wind(speed=5.75, deg=230), clouds=75
        ),
        forecast=REPORT.forecast,
    )
    monkeypatch.setattr(
        "weather.views.get_weather_by_ip", _fake_by_ip(report)
    )
    body = Client().get("/").content.decode()
    assert "5.75 mph at 230&deg;" in body
    assert "<dt>Clouds</dt><dd>75%</dd>" in body
