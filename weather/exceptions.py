"""Error kinds raised while resolving locations and fetching weather.

All of them are DRF ``APIException`` subclasses so the JSON API renders them
through ``config.api.exceptions.custom_exception_handler``; the HTML views
catch them and render the page with the error message instead.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.exceptions import APIException


class WeatherServiceError(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Error fetching weather data"
    default_code = "weather_error"

    @property
    def message(self) -> str:
        return str(self.detail)


class ValidationError(WeatherServiceError):
    """Bad user input, raised before any outbound call."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Please enter a location."
    default_code = "invalid"


class NotFoundError(WeatherServiceError):
    """Geocoding returned no candidate location."""

    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Location not found."
    default_code = "not_found"


class UpstreamError(WeatherServiceError):
    """Network, status or payload failure from an external provider."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Error fetching weather data"
    default_code = "upstream_error"
