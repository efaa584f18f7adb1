from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal

NOT_AVAILABLE = "N/A"

Sentinel = Literal["N/A"]
LocationMethod = Literal["ip", "query"]


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lon: float


@dataclass(frozen=True)
class PlaceLabel:
    city: str
    region: str = ""
    country: str = ""

    def display(self) -> str:
        """Join the non-empty parts for display, e.g. ``Austin, TX, US``."""

        return ", ".join(
            part for part in (self.city, self.region, self.country) if part
        )


@dataclass(frozen=True)
class PlaceQuery:
    city: str
    region: str = ""
    country: str = ""

    def as_provider_query(self) -> str:
        return ",".join(
            part for part in (self.city, self.region, self.country) if part
        )


@dataclass(frozen=True)
class ResolvedLocation:
    coordinates: Coordinates
    place: PlaceLabel
    method: LocationMethod


@dataclass(frozen=True)
class Wind:
    speed: float | Sentinel
    deg: float | Sentinel


@dataclass(frozen=True)
class CurrentWeather:
    location: str
    temperature: int
    feels_like: int
    temp_min: int
    temp_max: int
    humidity: float | None
    pressure_inhg: str
    wind: Wind
    rain: float
    clouds: float | Sentinel
    weather_icon: str
    weather_description: str


@dataclass(frozen=True)
class ForecastEntry:
    date: str
    temp: int
    icon: str
    description: str


@dataclass(frozen=True)
class WeatherReport:
    current: CurrentWeather
    forecast: Sequence[ForecastEntry] = field(default_factory=list)
