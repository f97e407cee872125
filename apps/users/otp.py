"""One-time codes for signup verification, passwordless login and password reset.

Codes live in Django's cache framework under ``otp:{purpose}:{email}`` and
expire after ``OTP_TTL_SECONDS``. A code is consumed on success and after the
attempt limit is reached.
"""

from __future__ import annotations

import logging
import secrets
import time
from dataclasses import dataclass

from django.utils.translation import gettext_lazy as _  # type: ignore

logger = logging.getLogger(__name__)


class OtpPurpose:
    SIGNUP = "signup"
    LOGIN = "login"
    RESET = "reset"

    ALL = (SIGNUP, LOGIN, RESET)


REASON_MESSAGES = {
    "expired": _("Code has expired or was never requested."),
    "invalid": _("Invalid code."),
    "too_many_attempts": _("Too many attempts. Request a new code."),
}


@dataclass(frozen=True)
class OtpVerification:
    ok: bool
    reason: str | None = None

    @property
    def message(self) -> str:
        return str(REASON_MESSAGES.get(self.reason or "", ""))


class OtpStore:
    """Хранилище одноразовых кодов поверх backend-а кэша Django."""

    def __init__(self, cache, ttl_seconds: int = 300, max_attempts: int = 5) -> None:
        self.cache = cache
        self.ttl_seconds = ttl_seconds
        self.max_attempts = max_attempts

    @staticmethod
    def key(email: str, purpose: str) -> str:
        return f"otp:{purpose}:{email.lower()}"

    @staticmethod
    def generate_code() -> str:
        return f"{secrets.randbelow(900000) + 100000}"

    def issue(self, email: str, purpose: str) -> str:
        code = self.generate_code()
        payload = {"code": code, "attempts": 0, "expires_at": time.time() + self.ttl_seconds}
        self.cache.set(self.key(email, purpose), payload, timeout=self.ttl_seconds)
        logger.info("Issued %s code for %s", purpose, email)
        return code

    def has(self, email: str, purpose: str) -> bool:
        return self._load(self.key(email, purpose)) is not None

    def discard(self, email: str, purpose: str) -> None:
        self.cache.delete(self.key(email, purpose))

    def verify(self, email: str, purpose: str, code: str) -> OtpVerification:
        key = self.key(email, purpose)
        payload = self._load(key)
        if payload is None:
            return OtpVerification(ok=False, reason="expired")

        payload["attempts"] += 1
        if payload["attempts"] > self.max_attempts:
            self.cache.delete(key)
            logger.warning("Code for %s (%s) exhausted its attempts", email, purpose)
            return OtpVerification(ok=False, reason="too_many_attempts")

        if not secrets.compare_digest(str(payload["code"]), str(code)):
            remaining = max(int(payload["expires_at"] - time.time()), 1)
            self.cache.set(key, payload, timeout=remaining)
            return OtpVerification(ok=False, reason="invalid")

        self.cache.delete(key)
        return OtpVerification(ok=True)

    def _load(self, key: str) -> dict | None:
        payload = self.cache.get(key)
        if payload is None:
            return None
        if payload["expires_at"] <= time.time():
            self.cache.delete(key)
            return None
        return payload
