from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any, cast

from django.conf import settings

from .engines.base import WeatherProvider
from .engines.ipapi import IpApiLocator
from .engines.registry import build_locator, build_provider
from .engines.types import (
    NOT_AVAILABLE,
    Coordinates,
    CurrentWeather,
    ForecastEntry,
    PlaceLabel,
    PlaceQuery,
    ResolvedLocation,
    Sentinel,
    WeatherReport,
    Wind,
)
from .exceptions import (
    NotFoundError,
    UpstreamError,
    ValidationError,
    WeatherServiceError,
)
from .metrics import weather_location_lookups_total
from .timeutils import get_zone

logger = logging.getLogger(__name__)

HPA_TO_INHG = 0.02953
SAMPLES_PER_DAY = 8
FORECAST_DAYS = 5


def parse_location_query(raw: str | None) -> PlaceQuery:
    """Split ``"City, Region, Country"`` into positional parts.

    Region and country are optional; empty segments stay empty so
    ``"Paris,,FR"`` keeps ``FR`` as the country.
    """

    if raw is None or not raw.strip():
        raise ValidationError("Please enter a location.")
    parts = [segment.strip() for segment in raw.split(",")][:3]
    parts += [""] * (3 - len(parts))
    if not any(parts):
        raise ValidationError("Please enter a location.")
    city, region, country = parts
    return PlaceQuery(city=city, region=region, country=country)


async def resolve_by_ip(
    locator: IpApiLocator | None = None,
) -> ResolvedLocation:
    locator = locator or build_locator()
    try:
        location = await locator.lookup()
    except WeatherServiceError:
        weather_location_lookups_total.labels(
            method="ip", outcome="error"
        ).inc()
        raise
    weather_location_lookups_total.labels(method="ip", outcome="ok").inc()
    _log_resolved(location)
    return location


async def resolve_by_query(
    raw: str | None, provider: WeatherProvider | None = None
) -> ResolvedLocation:
    query = parse_location_query(raw)
    provider = provider or build_provider()
    try:
        matches = await provider.geocode(query.as_provider_query(), limit=1)
    except WeatherServiceError:
        weather_location_lookups_total.labels(
            method="query", outcome="error"
        ).inc()
        raise
    if not matches:
        weather_location_lookups_total.labels(
            method="query", outcome="not_found"
        ).inc()
        raise NotFoundError(f"No location found for '{raw}'.")

    match = matches[0]
    try:
        coords = Coordinates(lat=float(match["lat"]), lon=float(match["lon"]))
    except (KeyError, TypeError, ValueError) as exc:
        raise UpstreamError("Geocoding match is missing coordinates") from exc

    # Not every country has a modelled state, so a missing one is fine.
    place = PlaceLabel(
        city=str(match.get("name") or query.city),
        region=str(match.get("state") or ""),
        country=str(match.get("country") or ""),
    )
    location = ResolvedLocation(
        coordinates=coords, place=place, method="query"
    )
    weather_location_lookups_total.labels(method="query", outcome="ok").inc()
    _log_resolved(location)
    return location


def _log_resolved(location: ResolvedLocation) -> None:
    logger.info(
        "Location resolved: %s (%s, %s)",
        location.place.display(),
        location.coordinates.lat,
        location.coordinates.lon,
    )


async def get_weather_report(
    location: ResolvedLocation, provider: WeatherProvider | None = None
) -> WeatherReport:
    """Fetch current conditions and the forecast together.

    Both calls run concurrently and are awaited to completion; if either
    fails the whole report fails with no partial result.
    """

    provider = provider or build_provider()
    current_payload, forecast_payload = await asyncio.gather(
        provider.current(location.coordinates),
        provider.forecast(location.coordinates),
        return_exceptions=True,
    )
    for outcome in (current_payload, forecast_payload):
        if isinstance(outcome, WeatherServiceError):
            raise outcome
        if isinstance(outcome, Exception):
            raise UpstreamError(str(outcome)) from outcome
    return WeatherReport(
        current=normalize_current(
            cast(Mapping[str, Any], current_payload), location.place
        ),
        forecast=normalize_forecast(
            cast(Mapping[str, Any], forecast_payload)
        ),
    )


async def get_weather_by_ip(
    locator: IpApiLocator | None = None,
    provider: WeatherProvider | None = None,
) -> WeatherReport:
    location = await resolve_by_ip(locator)
    return await get_weather_report(location, provider)


async def get_weather_by_query(
    raw: str | None, provider: WeatherProvider | None = None
) -> WeatherReport:
    provider = provider or build_provider()
    location = await resolve_by_query(raw, provider)
    return await get_weather_report(location, provider)


def pressure_to_inhg(hpa: float) -> str:
    """Convert hectopascals to inches of mercury as display text."""

    return f"{float(hpa) * HPA_TO_INHG:.2f}"


def round_half_up(value: Any) -> int:
    return math.floor(float(value) + 0.5)


def normalize_current(
    payload: Mapping[str, Any], place: PlaceLabel
) -> CurrentWeather:
    try:
        main = payload["main"]
        temperature = round_half_up(main["temp"])
        feels_like = round_half_up(main["feels_like"])
        temp_min = round_half_up(main["temp_min"])
        temp_max = round_half_up(main["temp_max"])
        pressure = pressure_to_inhg(main["pressure"])
        # An empty weather list raises IndexError and is not caught here.
        condition = payload["weather"][0]
        icon = condition["icon"]
        description = condition["description"]
    except (KeyError, TypeError, ValueError) as exc:
        raise UpstreamError(
            "Malformed current conditions payload"
        ) from exc

    wind = payload.get("wind")
    if isinstance(wind, Mapping):
        wind_reading = Wind(
            speed=wind.get("speed", NOT_AVAILABLE),
            deg=wind.get("deg", NOT_AVAILABLE),
        )
    else:
        wind_reading = Wind(speed=NOT_AVAILABLE, deg=NOT_AVAILABLE)

    # Absent rain and a rain block without "1h" both read as 0.
    rain = payload.get("rain")
    rain_1h = (rain.get("1h") or 0) if isinstance(rain, Mapping) else 0

    clouds = payload.get("clouds")
    coverage: float | Sentinel = (
        clouds.get("all", NOT_AVAILABLE)
        if isinstance(clouds, Mapping)
        else NOT_AVAILABLE
    )

    return CurrentWeather(
        location=place.display(),
        temperature=temperature,
        feels_like=feels_like,
        temp_min=temp_min,
        temp_max=temp_max,
        humidity=main.get("humidity"),
        pressure_inhg=pressure,
        wind=wind_reading,
        rain=rain_1h,
        clouds=coverage,
        weather_icon=icon,
        weather_description=description,
    )


def normalize_forecast(payload: Mapping[str, Any]) -> list[ForecastEntry]:
    """Pick one 3-hour sample per day (indices 0, 8, 16, ...), at most 5."""

    samples = payload.get("list") or []
    if not isinstance(samples, Sequence) or isinstance(samples, str):
        raise UpstreamError("Malformed forecast payload")
    zone = get_zone(getattr(settings, "WEATHER_DISPLAY_TZ", "UTC"))
    entries: list[ForecastEntry] = []
    for item in samples[::SAMPLES_PER_DAY][:FORECAST_DAYS]:
        try:
            stamp = datetime.fromtimestamp(int(item["dt"]), tz=zone)
            temp = round_half_up(item["main"]["temp"])
            condition = item["weather"][0]
            icon = condition["icon"]
            description = condition["description"]
        except (KeyError, TypeError, ValueError) as exc:
            raise UpstreamError("Malformed forecast payload") from exc
        entries.append(
            ForecastEntry(
                date=format_forecast_date(stamp),
                temp=temp,
                icon=icon,
                description=description,
            )
        )
    return entries


def format_forecast_date(stamp: datetime) -> str:
    """Short label such as ``Mon, Jan 5``."""

    return f"{stamp:%a}, {stamp:%b} {stamp.day}"
