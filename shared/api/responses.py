"""Standard API response envelope helpers."""

from __future__ import annotations

from typing import Any

from rest_framework import status as http_status  # type: ignore
from rest_framework.response import Response  # type: ignore

ENVELOPE_KEYS = frozenset({"success", "message", "statusCode"})

DEFAULT_MESSAGES = {
    http_status.HTTP_200_OK: "Success",
    http_status.HTTP_201_CREATED: "Created successfully",
    http_status.HTTP_202_ACCEPTED: "Accepted",
}


def build_envelope(
    data: Any = None,
    *,
    message: str | None = None,
    status_code: int = http_status.HTTP_200_OK,
    errors: Any = None,
) -> dict[str, Any]:
    success = status_code < 400
    payload: dict[str, Any] = {
        "success": success,
        "message": message or DEFAULT_MESSAGES.get(status_code, "Success" if success else "Request failed"),
    }
    if data is not None:
        payload["data"] = data
    if errors is not None:
        payload["errors"] = errors
    payload["statusCode"] = status_code
    return payload


def is_envelope(data: Any) -> bool:
    return isinstance(data, dict) and ENVELOPE_KEYS.issubset(data.keys())


def success_response(
    data: Any = None,
    message: str | None = None,
    status_code: int = http_status.HTTP_200_OK,
    headers: dict[str, str] | None = None,
) -> Response:
    return Response(
        build_envelope(data, message=message, status_code=status_code),
        status=status_code,
        headers=headers,
    )


def error_response(message: str, status_code: int = http_status.HTTP_400_BAD_REQUEST, errors: Any = None) -> Response:
    return Response(
        build_envelope(message=message, status_code=status_code, errors=errors),
        status=status_code,
    )
