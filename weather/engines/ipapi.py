from __future__ import annotations

from typing import Any, cast

import httpx
from django.conf import settings

from .base import JSONClient
from .types import Coordinates, PlaceLabel, ResolvedLocation


class IpApiLocator(JSONClient):
    """Caller geolocation through ipapi.co.

    The request carries no address; the service infers it from the
    connection, so behind a proxy this resolves the server's egress address.
    """

    name = "ipapi"
    _REQUIRED = (
        "city",
        "region_code",
        "country_name",
        "latitude",
        "longitude",
    )

    def __init__(
        self,
        *,
        url: str | None = None,
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
        self.url: str = url or cast(
            str, getattr(settings, "IPAPI_URL", "https://ipapi.co/json/")
        )

    async def lookup(self) -> ResolvedLocation:
        payload = await self._request()
        if payload.get("error"):
            reason = payload.get("reason") or "unknown error"
            raise self._provider_error(
                "lookup",
                "ProviderError",
                f"IP geolocation failed: {reason}",
            )

        # Blank region or country strings are accepted; absent keys are not.
        missing = [key for key in self._REQUIRED if payload.get(key) is None]
        if missing:
            raise self._provider_error(
                "lookup",
                "MissingFields",
                "IP geolocation response missing: " + ", ".join(missing),
            )
        try:
            coords = Coordinates(
                lat=float(payload["latitude"]),
                lon=float(payload["longitude"]),
            )
        except (TypeError, ValueError) as exc:
            raise self._provider_error(
                "lookup",
                "BadCoordinates",
                "IP geolocation returned bad coordinates",
            ) from exc

        place = PlaceLabel(
            city=str(payload["city"]),
            region=str(payload["region_code"]),
            country=str(payload["country_name"]),
        )
        return ResolvedLocation(coordinates=coords, place=place, method="ip")

    async def _request(self) -> dict[str, Any]:
        data = await self._get_json(self.url, endpoint="lookup")
        if not isinstance(data, dict):
            raise self._provider_error(
                "lookup",
                "UnexpectedShape",
                "Unexpected IP geolocation response shape",
            )
        return data
