"""drf-spectacular helpers for documenting the JSON envelope.

`config.api.responses.success_response` and the global DRF exception handler
share one shape (status/message/data/errors); these build matching inline
serializers for the schema.
"""

from __future__ import annotations

from drf_spectacular.utils import inline_serializer
from rest_framework import serializers
from rest_framework.serializers import Serializer


def _envelope(name: str, data: serializers.Field) -> Serializer:
    return inline_serializer(
        name=name,
        fields={
            "status": serializers.IntegerField(),
            "message": serializers.CharField(),
            "data": data,
            "errors": serializers.JSONField(allow_null=True),
        },
    )


def success_envelope_serializer(
    name: str,
    *,
    data: serializers.Field,
) -> Serializer:
    return _envelope(name, data)


def error_envelope_serializer(name: str) -> Serializer:
    """Errors always carry `data: null` and the DRF detail under `errors`."""

    return _envelope(name, serializers.JSONField(allow_null=True))
