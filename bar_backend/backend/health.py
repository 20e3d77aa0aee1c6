# backend/health.py

"""
Operational probes.

- database_status(): SELECT 1 on a connection alias
- health_check:      GET /api/health/ (public), 200 or 503
"""

from __future__ import annotations

import logging

from django.db import DatabaseError, connections
from django.utils import timezone
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

logger = logging.getLogger(__name__)


def database_status(alias: str = "default") -> tuple[bool, str]:
    """Returns (ok, error_text)."""
    try:
        with connections[alias].cursor() as cursor:
            cursor.execute("SELECT 1;")
            cursor.fetchone()
    except DatabaseError as exc:
        logger.error("Database health check failed", extra={"db_alias": alias})
        return False, str(exc)
    return True, ""


@extend_schema(
    responses={
        200: OpenApiResponse(description="Application and database are up"),
        503: OpenApiResponse(description="Database unreachable"),
    },
)
@api_view(["GET"])
@authentication_classes([])
@permission_classes([AllowAny])
def health_check(request):
    ok, error = database_status()
    body = {"status": "ok" if ok else "degraded", "db": "ok" if ok else "down", "timestamp": timezone.now().isoformat()}
    if not ok:
        body["error"] = error
    return Response(body, status=200 if ok else 503)
