# backend/cors.py

"""
PATH: backend/cors.py

CORS ORIGIN POLICY

A pure function decides whether an Origin may talk to the API:
- no Origin header            -> allow (curl, server-to-server, mobile)
- localhost / 127.0.0.1       -> allow outside production only
- explicit allow-list         -> allow (CORS_ALLOWED_ORIGINS + FRONTEND_URL + FRONTEND_VERCEL_URL)
- deployment-preview pattern  -> allow (CORS_PREVIEW_ORIGIN_PATTERN)
- anything else               -> deny

Wiring:
- CorsOriginPolicyMiddleware runs first in MIDDLEWARE and answers denied
  origins with a dedicated 403 body (never reaches routing or DRF).
  The 403 carries no Access-Control-* headers, so a browser reports a
  network-level CORS failure and script cannot read the body; the body is
  for non-browser clients.
- django-cors-headers emits the Access-Control-* headers; it asks the same
  policy through its `check_request_enabled` signal (see backend/apps.py).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional, Pattern

from django.conf import settings
from django.http import JsonResponse
from django.utils import timezone

logger = logging.getLogger(__name__)

LOCAL_ORIGIN_PREFIXES = ("http://localhost", "http://127.0.0.1")


@dataclass(frozen=True)
class CorsPolicyConfig:
    allowed_origins: frozenset = field(default_factory=frozenset)
    preview_pattern: Optional[Pattern] = None
    is_production: bool = False
    local_prefixes: tuple = LOCAL_ORIGIN_PREFIXES

    @classmethod
    def from_settings(cls, conf=None) -> "CorsPolicyConfig":
        conf = conf or settings

        explicit = [
            *getattr(conf, "CORS_ALLOWED_ORIGINS", []),
            getattr(conf, "FRONTEND_URL", ""),
            getattr(conf, "FRONTEND_VERCEL_URL", ""),
        ]
        raw_pattern = (getattr(conf, "CORS_PREVIEW_ORIGIN_PATTERN", "") or "").strip()
        app_env = (getattr(conf, "APP_ENV", "development") or "").strip().lower()

        return cls(
            allowed_origins=frozenset(_normalize(o) for o in explicit if o and o.strip()),
            preview_pattern=re.compile(raw_pattern) if raw_pattern else None,
            is_production=app_env == "production",
        )


def _normalize(origin: str) -> str:
    return origin.strip().rstrip("/")


def origin_decision(origin: Optional[str], *, config: CorsPolicyConfig) -> tuple[bool, str]:
    """
    Evaluate the policy and say which rule decided it.

    Returns (allowed, rule) where rule is one of:
    "no-origin", "localhost", "allow-list", "preview-pattern", "denied".
    """
    if not origin:
        return True, "no-origin"

    origin = _normalize(origin)

    if not config.is_production and origin.startswith(config.local_prefixes):
        return True, "localhost"

    if origin in config.allowed_origins:
        return True, "allow-list"

    if config.preview_pattern is not None and config.preview_pattern.match(origin):
        return True, "preview-pattern"

    return False, "denied"


def is_origin_allowed(origin: Optional[str], *, config: CorsPolicyConfig) -> bool:
    allowed, _rule = origin_decision(origin, config=config)
    return allowed


@lru_cache(maxsize=1)
def get_policy_config() -> CorsPolicyConfig:
    return CorsPolicyConfig.from_settings()


def reset_policy_config(**kwargs) -> None:
    """Drop the cached config (connected to `setting_changed`)."""
    get_policy_config.cache_clear()


# =========================================================
# django-cors-headers signal receiver
# =========================================================
def cors_allow_by_policy(sender, request, **kwargs) -> bool:
    origin = request.headers.get("Origin")
    return bool(origin) and is_origin_allowed(origin, config=get_policy_config())


# =========================================================
# Middleware
# =========================================================
class CorsOriginPolicyMiddleware:
    """
    Rejects requests from disallowed origins before routing.

    Same-origin requests (Origin equals this host) are not cross-origin and
    always pass, so the Django admin keeps working in production.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        origin = request.headers.get("Origin")

        if not origin or self._is_same_origin(request, origin):
            return self.get_response(request)

        allowed, rule = origin_decision(origin, config=get_policy_config())
        if allowed:
            logger.debug("CORS origin allowed", extra={"origin": origin, "rule": rule})
            return self.get_response(request)

        logger.warning(
            "CORS origin blocked: %s %s from %s",
            request.method,
            request.path,
            origin,
            extra={"origin": origin, "method": request.method, "path": request.path},
        )
        return JsonResponse(
            {
                "success": False,
                "error": "CORS Error",
                "message": "Origin not allowed",
                "origin": origin,
                "timestamp": timezone.now().isoformat(),
            },
            status=403,
        )

    @staticmethod
    def _is_same_origin(request, origin: str) -> bool:
        host = request.META.get("HTTP_HOST")
        if not host:
            return False
        return _normalize(origin) == f"{request.scheme}://{host}"
