"""DRF exception handler that renders every failure in the response envelope."""

from __future__ import annotations

import logging

from django.conf import settings  # type: ignore
from django.core.exceptions import PermissionDenied as DjangoPermissionDenied  # type: ignore
from django.db import IntegrityError  # type: ignore
from django.http import Http404  # type: ignore
from rest_framework import exceptions, status  # type: ignore
from rest_framework.views import exception_handler  # type: ignore

from shared.domain.errors import DomainError

from .responses import error_response

logger = logging.getLogger(__name__)

STATUS_MESSAGES = {
    status.HTTP_400_BAD_REQUEST: "Validation failed",
    status.HTTP_401_UNAUTHORIZED: "Unauthorized access",
    status.HTTP_403_FORBIDDEN: "Access forbidden",
    status.HTTP_404_NOT_FOUND: "Resource not found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "Method not allowed",
    status.HTTP_409_CONFLICT: "Resource conflict",
    status.HTTP_429_TOO_MANY_REQUESTS: "Too many requests, please try again later",
}

PASSTHROUGH_HEADERS = ("WWW-Authenticate", "Retry-After", "Allow")


def _detail_message(detail, fallback: str) -> str:
    if isinstance(detail, str):
        return detail
    if isinstance(detail, dict) and isinstance(detail.get("detail"), str):
        return detail["detail"]
    return fallback


def envelope_exception_handler(exc, context):  # type: ignore
    """Map domain, DRF and database errors onto ``{success: false, ...}``."""

    if isinstance(exc, DomainError):
        return error_response(
            exc.message,
            status_code=exc.status_code,
            errors={"code": exc.code, **({"details": exc.errors} if exc.errors else {})},
        )

    if isinstance(exc, IntegrityError):
        logger.warning("Integrity error in %s: %s", context.get("view").__class__.__name__, exc)
        return error_response(
            STATUS_MESSAGES[status.HTTP_409_CONFLICT],
            status_code=status.HTTP_409_CONFLICT,
            errors={"code": "conflict"},
        )

    if isinstance(exc, Http404):
        exc = exceptions.NotFound()
    elif isinstance(exc, DjangoPermissionDenied):
        exc = exceptions.PermissionDenied()

    response = exception_handler(exc, context)
    if response is None:
        view = context.get("view")
        logger.exception("Unhandled error in %s", view.__class__.__name__ if view else "unknown view")
        errors = {"code": "internal_error"}
        if settings.DEBUG:
            errors["details"] = repr(exc)
        return error_response(
            "Internal server error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            errors=errors,
        )

    fallback = STATUS_MESSAGES.get(response.status_code, "Request failed")
    if isinstance(exc, exceptions.ValidationError):
        message, errors = fallback, response.data
    else:
        message = _detail_message(response.data, fallback)
        errors = {"code": getattr(exc, "default_code", "error")}
        if isinstance(response.data, dict) and "code" in response.data:
            errors["details"] = response.data

    envelope = error_response(message, status_code=response.status_code, errors=errors)
    for header in PASSTHROUGH_HEADERS:
        if header in response:
            envelope[header] = response[header]
    return envelope
