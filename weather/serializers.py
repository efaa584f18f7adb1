from __future__ import annotations

from typing import ClassVar

from rest_framework import serializers

from config.api.responses import JSONValue

from .engines.types import WeatherReport


class LocationParamsSerializer(serializers.Serializer):
    location: ClassVar[serializers.CharField] = serializers.CharField(
        required=False,
        allow_blank=True,
        trim_whitespace=False,
        max_length=200,
    )


class WindSerializer(serializers.Serializer):
    speed: ClassVar[serializers.JSONField] = serializers.JSONField()
    deg: ClassVar[serializers.JSONField] = serializers.JSONField()


class CurrentWeatherSerializer(serializers.Serializer):
    location: ClassVar[serializers.CharField] = serializers.CharField()
    temperature: ClassVar[serializers.IntegerField] = (
        serializers.IntegerField()
    )
    feels_like: ClassVar[serializers.IntegerField] = (
        serializers.IntegerField()
    )
    temp_min: ClassVar[serializers.IntegerField] = serializers.IntegerField()
    temp_max: ClassVar[serializers.IntegerField] = serializers.IntegerField()
    humidity: ClassVar[serializers.FloatField] = serializers.FloatField(
        allow_null=True
    )
    pressure_inhg: ClassVar[serializers.CharField] = serializers.CharField()
    wind: ClassVar[WindSerializer] = WindSerializer()
    rain: ClassVar[serializers.FloatField] = serializers.FloatField()
    clouds: ClassVar[serializers.JSONField] = serializers.JSONField()
    weather_icon: ClassVar[serializers.CharField] = serializers.CharField()
    weather_description: ClassVar[serializers.CharField] = (
        serializers.CharField()
    )


class ForecastEntrySerializer(serializers.Serializer):
    date: ClassVar[serializers.CharField] = serializers.CharField()
    temp: ClassVar[serializers.IntegerField] = serializers.IntegerField()
    icon: ClassVar[serializers.CharField] = serializers.CharField()
    description: ClassVar[serializers.CharField] = serializers.CharField()


class WeatherReportSerializer(serializers.Serializer):
    current: ClassVar[CurrentWeatherSerializer] = CurrentWeatherSerializer()
    forecast: ClassVar[ForecastEntrySerializer] = ForecastEntrySerializer(
        many=True
    )


def serialize_report(report: WeatherReport) -> dict[str, JSONValue]:
    serializer = WeatherReportSerializer(report)
    return dict(serializer.data)
