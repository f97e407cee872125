"""
Domain errors

Services raise these instead of framework exceptions so that callers can
branch on a stable ``code``. The API layer maps them onto HTTP responses
(see ``shared.api.exceptions``).
"""

from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """Base class for all expected business-rule failures."""

    status_code = 400
    code = "domain_error"
    default_message = "Request could not be processed"

    def __init__(self, message: str | None = None, *, errors: Any = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class DomainValidationError(DomainError):
    code = "validation_error"
    default_message = "Validation failed"


class InvalidStateError(DomainError):
    code = "invalid_state"
    default_message = "Operation is not allowed in the current state"


class PolicyViolationError(DomainError):
    code = "policy_violation"
    default_message = "Request violates a listing policy"


class UnauthorizedError(DomainError):
    status_code = 401
    code = "unauthorized"
    default_message = "Unauthorized access"


class ForbiddenError(DomainError):
    status_code = 403
    code = "forbidden"
    default_message = "Access forbidden"


class NotFoundError(DomainError):
    status_code = 404
    code = "not_found"
    default_message = "Resource not found"


class ConflictError(DomainError):
    status_code = 409
    code = "conflict"
    default_message = "Resource conflict"


class UpstreamError(DomainError):
    status_code = 502
    code = "upstream_unavailable"
    default_message = "External service is unavailable"
