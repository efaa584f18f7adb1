"""Project-level non-DRF views."""

from __future__ import annotations

from django.conf import settings
from django.http import HttpRequest, JsonResponse


def health(request: HttpRequest) -> JsonResponse:
    """Return basic service metadata and documentation links."""
    return JsonResponse(
        {
            "ok": True,
            "service": "weather-now",
            "api_key_configured": bool(settings.WEATHER_API_KEY),
            "docs": "/api/docs/",
        }
    )
