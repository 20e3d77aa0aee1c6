# backend/errors.py

"""
DOMAIN ERRORS

Raised by services at the point of detection and translated to HTTP
exactly once, by backend.exceptions.api_exception_handler.

Error               HTTP
ValidationError     400
NotFound            404
InsufficientStock   400
InvalidStatus       400
Unauthorized        401
Forbidden           403
Internal            500
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for every error the API boundary knows how to shape."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, *, errors: dict | None = None, **context):
        self.message = message or self.default_message
        self.errors = errors
        # Extra diagnostic context (entity ids, operation) for logs only.
        self.context = context
        super().__init__(self.message)


class ValidationError(DomainError):
    status_code = 400
    default_message = "Validation error"


class NotFound(DomainError):
    status_code = 404
    default_message = "Resource not found"


class InsufficientStock(DomainError):
    status_code = 400
    default_message = "Insufficient stock"

    def __init__(self, message: str | None = None, *, product_id=None, product_name=None,
                 available=None, requested=None, **context):
        super().__init__(
            message,
            product_id=product_id,
            product_name=product_name,
            available=available,
            requested=requested,
            **context,
        )
        self.product_id = product_id
        self.product_name = product_name
        self.available = available
        self.requested = requested


class InvalidStatus(DomainError):
    status_code = 400
    default_message = "Invalid status"


class Unauthorized(DomainError):
    status_code = 401
    default_message = "Authentication required"


class Forbidden(DomainError):
    status_code = 403
    default_message = "You do not have permission to perform this action"


class Internal(DomainError):
    status_code = 500
    default_message = "Internal server error"
