"""
URL configuration for the weather-now project.
"""

# Routes:
# - GET / -> weather page for the caller's IP location
# - GET /search?location= -> weather page for a typed location
# - GET /healthz -> service metadata
# - /metrics -> Prometheus exposition
# - /api/schema/ -> OpenAPI schema
# - /api/docs/ -> Swagger UI
# - /api/v1/ -> weather.urls (JSON)

from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from weather import views as weather_views

from .views import health

urlpatterns = [
    path("", weather_views.index, name="weather-index"),
    path("search", weather_views.search, name="weather-search"),
    path("healthz", health, name="health"),
    path("", include("django_prometheus.urls")),
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path(
        "api/docs/",
        SpectacularSwaggerView.as_view(url_name="schema"),
        name="swagger-ui",
    ),
    path("api/v1/", include("weather.urls")),
]
