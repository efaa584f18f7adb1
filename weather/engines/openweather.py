from __future__ import annotations

from typing import Any, cast

import httpx
from django.conf import settings

from ..exceptions import UpstreamError
from .base import JSONClient, WeatherProvider
from .types import Coordinates


class OpenWeatherProvider(JSONClient, WeatherProvider):
    """OpenWeatherMap implementation.

    Uses `/data/2.5/weather`, `/data/2.5/forecast` (5 days, 3-hour steps) and
    `/geo/1.0/direct`. Readings are always requested in imperial units.
    Settings are only consulted for arguments left unset.
    """

    name = "openweather"
    units = "imperial"

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(
            timeout=(
                timeout
                if timeout is not None
                else float(getattr(settings, "WEATHER_HTTP_TIMEOUT_S", 10.0))
            ),
            transport=transport,
        )
        self.api_key: str = (
            api_key
            if api_key is not None
            else cast(str, getattr(settings, "WEATHER_API_KEY", "") or "")
        )
        self.base_url: str = (
            base_url
            or cast(
                str,
                getattr(
                    settings,
                    "OPENWEATHER_BASE_URL",
                    "https://api.openweathermap.org",
                ),
            )
        ).rstrip("/")

    async def current(self, coords: Coordinates) -> dict[str, Any]:
        return await self._request(
            "/data/2.5/weather", self._coordinate_params(coords), "current"
        )

    async def forecast(self, coords: Coordinates) -> dict[str, Any]:
        return await self._request(
            "/data/2.5/forecast", self._coordinate_params(coords), "forecast"
        )

    async def geocode(
        self, query: str, limit: int = 1
    ) -> list[dict[str, Any]]:
        payload = await self._request(
            "/geo/1.0/direct", {"q": query, "limit": limit}, "geocode"
        )
        if not isinstance(payload, list):
            raise self._provider_error(
                "geocode",
                "UnexpectedShape",
                "Unexpected geocoding response shape",
            )
        return [item for item in payload if isinstance(item, dict)][:limit]

    def _coordinate_params(self, coords: Coordinates) -> dict[str, Any]:
        return {"lat": coords.lat, "lon": coords.lon, "units": self.units}

    async def _request(
        self, path: str, params: dict[str, Any], endpoint: str
    ) -> Any:
        if not self.api_key:
            raise UpstreamError("WEATHER_API_KEY is not configured")
        data = await self._get_json(
            f"{self.base_url}{path}",
            endpoint=endpoint,
            params={**params, "appid": self.api_key},
        )
        if endpoint != "geocode" and not isinstance(data, dict):
            raise self._provider_error(
                endpoint,
                "UnexpectedShape",
                f"Unexpected OpenWeatherMap {endpoint} response shape",
            )
        return data
