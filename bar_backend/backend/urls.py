# backend/urls.py

"""
PROJECT URLS

Everything public-facing lives under /api/:
- /api/              route index (public)
- /api/health/       DB-backed liveness probe (public)
- /api/docs/, /api/schema/
- /api/auth/...      users app
- /api/products/, /api/clients/, /api/sales/, /api/reports/

The Django admin mount point comes from settings.ADMIN_PATH.
"""

from __future__ import annotations

from django.conf import settings
from django.contrib import admin
from django.urls import include, path
from django.views.generic import RedirectView
from drf_spectacular.utils import extend_schema
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework_simplejwt.views import TokenRefreshView

from backend.health import health_check

DOMAIN_MODULES = ("products", "clients", "sales", "reports")

AUTH_ROUTES = ("register", "login", "profile", "change-password", "logout", "jwt/refresh")


@extend_schema(responses={200: dict})
@api_view(["GET"])
@permission_classes([AllowAny])
def api_index(request):
    return Response(
        {
            "message": "Bar Inventory API is running",
            "auth": {name: f"/api/auth/{name}/" for name in AUTH_ROUTES},
            "docs": {"swagger": "/api/docs/", "schema": "/api/schema/"},
            "modules": {name: f"/api/{name}/" for name in DOMAIN_MODULES},
            "health": "/api/health/",
        }
    )


def _admin_path() -> str:
    raw = (getattr(settings, "ADMIN_PATH", "") or "admin/").strip().lstrip("/")
    return raw if raw.endswith("/") else f"{raw}/"


api_urlpatterns = [
    path("", api_index, name="api-root"),
    path("health/", health_check, name="health-check"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    # Token pairs are issued by auth/login/ and auth/register/
    path("auth/jwt/refresh/", TokenRefreshView.as_view(), name="jwt-refresh"),
    path("auth/", include("users.urls")),
    *[path(f"{name}/", include(f"{name}.urls")) for name in DOMAIN_MODULES],
]

urlpatterns = [
    path(_admin_path(), admin.site.urls),
    path("", RedirectView.as_view(url="/api/docs/", permanent=False), name="root"),
    path("api/", include(api_urlpatterns)),
]
