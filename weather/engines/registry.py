from __future__ import annotations

from .base import WeatherProvider
from .ipapi import IpApiLocator
from .openweather import OpenWeatherProvider


def build_provider() -> WeatherProvider:
    """Instantiate the configured weather provider."""

    return OpenWeatherProvider()


def build_locator() -> IpApiLocator:
    """Instantiate the configured IP geolocation service."""

    return IpApiLocator()
