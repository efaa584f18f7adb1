"""Weather page and JSON endpoints.

HTML: `/` resolves the caller by IP, `/search?location=` by free text. Both
render `weather/index.html` with `weatherData`, `forecastData` and `error`.
JSON: `/api/v1/weather/` returns the same report wrapped by
`config.api.responses.success_response` (status/message/data/errors).
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable

from asgiref.sync import async_to_sync
from django.http import HttpRequest, HttpResponse
from django.shortcuts import render
from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiTypes,
    extend_schema,
)
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from config.api.openapi import (
    error_envelope_serializer,
    success_envelope_serializer,
)
from config.api.responses import success_response

from .engines.types import WeatherReport
from .exceptions import UpstreamError, ValidationError, WeatherServiceError
from .serializers import (
    LocationParamsSerializer,
    WeatherReportSerializer,
    serialize_report,
)
from .services import get_weather_by_ip, get_weather_by_query

logger = logging.getLogger(__name__)

TEMPLATE_NAME = "weather/index.html"

report_success_schema = success_envelope_serializer(
    "WeatherReportSuccess",
    data=WeatherReportSerializer(),
)
weather_error_schema = error_envelope_serializer("WeatherErrorResponse")


def _render_page(
    request: HttpRequest,
    *,
    report: WeatherReport | None = None,
    error: str | None = None,
    query: str = "",
    status: int = 200,
) -> HttpResponse:
    context = {
        "weatherData": report.current if report else None,
        "forecastData": list(report.forecast) if report else [],
        "error": error,
        "query": query,
    }
    return render(request, TEMPLATE_NAME, context, status=status)


async def _render_report(
    request: HttpRequest, pending: Awaitable[WeatherReport], query: str = ""
) -> HttpResponse:
    try:
        report = await pending
    except ValidationError as exc:
        logger.warning("Rejected location query: %s", exc.message)
        # Validation failures re-render the form without an error status.
        return _render_page(request, error=exc.message, query=query)
    except WeatherServiceError as exc:
        if isinstance(exc, UpstreamError):
            logger.error("Error: %s", exc.message)
        else:
            logger.warning("Error: %s", exc.message)
        return _render_page(
            request, error=exc.message, query=query, status=exc.status_code
        )
    return _render_page(request, report=report, query=query)


async def index(request: HttpRequest) -> HttpResponse:
    """Weather for the caller's own location."""

    return await _render_report(request, get_weather_by_ip())


async def search(request: HttpRequest) -> HttpResponse:
    """Weather for a typed ``City, Region, Country`` location."""

    query = request.GET.get("location", "")
    return await _render_report(request, get_weather_by_query(query), query)


class WeatherReportView(APIView):
    """Current conditions plus a 5-day forecast as JSON.

    Auth: none.
    Response: success envelope with `current` and `forecast`. Without
    `location` the caller is located by IP address.
    """

    permission_classes = [AllowAny]

    @extend_schema(
        parameters=[
            OpenApiParameter(
                name="location",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=False,
                description="City, Region, Country (region/country optional)",
            ),
        ],
        responses={
            200: report_success_schema,
            400: weather_error_schema,
            404: weather_error_schema,
            500: weather_error_schema,
        },
    )
    def get(self, request: Request) -> Response:
        serializer = LocationParamsSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        location = serializer.validated_data.get("location")

        if location is None:
            report = async_to_sync(get_weather_by_ip)()
        else:
            report = async_to_sync(get_weather_by_query)(location)
        return success_response(serialize_report(report))
