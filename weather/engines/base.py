from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import Any

import httpx

from ..exceptions import UpstreamError
from ..metrics import (
    weather_provider_errors_total,
    weather_provider_latency_seconds,
    weather_provider_requests_total,
)
from .types import Coordinates


class JSONClient:
    """Shared outbound JSON GET with provider metrics.

    Every failure surfaces as ``UpstreamError`` and is counted in
    ``weather_provider_errors_total``. There are no retries.
    """

    name: str

    def __init__(
        self,
        *,
        timeout: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout = timeout
        self.transport = transport

    async def _get_json(
        self,
        url: str,
        *,
        endpoint: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        weather_provider_requests_total.labels(
            provider=self.name, endpoint=endpoint
        ).inc()
        start_time = time.perf_counter()
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.get(url, params=params)
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as exc:
            # The URL carries the API key, so it stays out of the message.
            reason = exc.__class__.__name__
            if isinstance(exc, httpx.HTTPStatusError):
                reason = f"HTTP {exc.response.status_code}"
            raise self._provider_error(
                endpoint,
                exc.__class__.__name__,
                f"{self.name} {endpoint} request failed ({reason})",
            ) from exc
        finally:
            duration = time.perf_counter() - start_time
            weather_provider_latency_seconds.labels(
                provider=self.name, endpoint=endpoint
            ).observe(duration)

    def _provider_error(
        self, endpoint: str, error_type: str, message: str
    ) -> UpstreamError:
        """Count a failed provider call and build the error to raise.

        Used for transport failures and for bodies that decode but are
        unusable (wrong shape, provider-reported errors, missing fields).
        """

        weather_provider_errors_total.labels(
            provider=self.name, endpoint=endpoint, error_type=error_type
        ).inc()
        return UpstreamError(message)


class WeatherProvider(ABC):
    """Abstract base for weather providers."""

    name: str

    @abstractmethod
    async def current(self, coords: Coordinates) -> dict[str, Any]:
        """Return the raw current-conditions payload."""

    @abstractmethod
    async def forecast(self, coords: Coordinates) -> dict[str, Any]:
        """Return the raw 5-day / 3-hour forecast payload."""

    @abstractmethod
    async def geocode(
        self, query: str, limit: int = 1
    ) -> list[dict[str, Any]]:
        """Return up to ``limit`` matches for a free-text place query."""
