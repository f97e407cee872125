"""
API rate limiting on top of django-ratelimit.

Counters live in the Django cache selected by ``RATELIMIT_USE_CACHE``: locmem
(per process) in dev and tests, Redis in production. Every counter is written
with the window as its TTL, so idle client keys expire on their own.
``RateLimitMiddleware`` resolves the group and rate once, when Django loads
the middleware chain.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from django.conf import settings  # type: ignore
from django.http import JsonResponse  # type: ignore
from django_ratelimit.core import get_usage  # type: ignore

from shared.api.responses import build_envelope

logger = logging.getLogger(__name__)

AUTH_GROUP = "api.auth"
GENERAL_GROUP = "api.general"


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    retry_after: int


def check_rate(request, group: str, rate: str, *, key: str = "ip") -> RateLimitDecision | None:  # type: ignore
    """Засчитывает запрос в окне группы. ``None`` если лимит не применяется."""

    usage = get_usage(request, group=group, key=key, rate=rate, increment=True)
    if usage is None:
        return None
    allowed = not usage["should_limit"]
    return RateLimitDecision(
        allowed=allowed,
        limit=usage["limit"],
        remaining=max(usage["limit"] - usage["count"], 0),
        retry_after=0 if allowed else max(int(usage["time_left"]), 1),
    )


class RateLimitMiddleware:
    """Ограничение частоты запросов к API по IP клиента."""

    auth_prefix = "/api/auth/"
    api_prefix = "/api/"

    def __init__(self, get_response):
        self.get_response = get_response
        rates = getattr(settings, "RATE_LIMITS", {})
        self.auth_rate = rates.get("auth", "5/5m")
        self.general_rate = rates.get("general", "100/15m")
        self.key = getattr(settings, "RATE_LIMIT_KEY", "ip")

    def _group_for(self, path: str) -> tuple[str, str] | None:
        if path.startswith(self.auth_prefix):
            return AUTH_GROUP, self.auth_rate
        if path.startswith(self.api_prefix):
            return GENERAL_GROUP, self.general_rate
        return None

    def __call__(self, request):  # type: ignore
        target = self._group_for(request.path)
        if target is None or not getattr(settings, "RATE_LIMIT_ENABLED", True):
            return self.get_response(request)

        decision = check_rate(request, *target, key=self.key)
        if decision is None:
            return self.get_response(request)

        if not decision.allowed:
            logger.warning("Rate limit exceeded for %s on %s", request.META.get("REMOTE_ADDR"), request.path)
            response = JsonResponse(
                build_envelope(
                    message="Too many requests, please try again later",
                    status_code=429,
                    errors={"code": "rate_limited"},
                ),
                status=429,
            )
            response["Retry-After"] = str(decision.retry_after)
        else:
            response = self.get_response(request)
        response["X-RateLimit-Limit"] = str(decision.limit)
        response["X-RateLimit-Remaining"] = str(decision.remaining)
        return response
