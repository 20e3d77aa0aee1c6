# backend/exceptions.py

"""
PATH: backend/exceptions.py

API EXCEPTION HANDLER (DRF EXCEPTION_HANDLER)

Single boundary translator:
- backend.errors.DomainError subclasses -> their own status code
- DRF / SimpleJWT / Django exceptions   -> DRF's status code
- anything else                         -> 500, logged with traceback

Body shape (always):
    {"success": false, "message": "<text>"}
plus "errors": {...} for validation failures.

CORS denials never reach this handler: backend.cors answers them before
routing.
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import exceptions as drf_exceptions
from rest_framework.response import Response
from rest_framework.serializers import as_serializer_error
from rest_framework.views import exception_handler as drf_exception_handler

from backend.errors import DomainError, Internal

logger = logging.getLogger(__name__)


def _request_context(context) -> dict:
    request = context.get("request") if context else None
    view = context.get("view") if context else None
    user = getattr(request, "user", None)
    return {
        "method": getattr(request, "method", None),
        "path": getattr(request, "path", None),
        "view": type(view).__name__ if view is not None else None,
        "user_id": str(getattr(user, "pk", "") or "") or None,
    }


def _first_message(data) -> str:
    """
    Flatten a DRF error payload into one human-readable line.
    """
    if isinstance(data, dict):
        if "detail" in data:
            return _first_message(data["detail"])
        for value in data.values():
            return _first_message(value)
        return ""
    if isinstance(data, (list, tuple)):
        return _first_message(data[0]) if data else ""
    return str(data)


def _error_body(message: str, errors=None) -> dict:
    body = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    return body


def api_exception_handler(exc, context):
    # ---------------- Domain errors ----------------
    if isinstance(exc, DomainError):
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            "Request failed: %s",
            exc.message,
            extra={
                **_request_context(context),
                "error_kind": type(exc).__name__,
                **{f"ctx_{k}": v for k, v in exc.context.items() if v is not None},
            },
        )
        return Response(_error_body(exc.message, exc.errors), status=exc.status_code)

    # ---------------- Django model validation ----------------
    if isinstance(exc, DjangoValidationError):
        exc = drf_exceptions.ValidationError(detail=as_serializer_error(exc))

    response = drf_exception_handler(exc, context)

    # ---------------- Unexpected ----------------
    if response is None:
        logger.exception(
            "Unhandled exception",
            extra=_request_context(context),
        )
        internal = Internal()
        return Response(_error_body(internal.message), status=internal.status_code)

    # ---------------- DRF / SimpleJWT ----------------
    if isinstance(exc, drf_exceptions.ValidationError):
        response.data = _error_body("Validation error", response.data)
    else:
        response.data = _error_body(_first_message(response.data))

    if response.status_code >= 500:
        logger.error("Request failed", extra=_request_context(context))
    else:
        logger.info(
            "Request rejected (%s)",
            response.status_code,
            extra=_request_context(context),
        )

    return response
