from __future__ import annotations

from django.apps import AppConfig  # type: ignore


class UsersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.users"
    label = "users"
    verbose_name = "Users"

    otp_store = None

    def ready(self) -> None:
        from django.conf import settings  # type: ignore
        from django.core.cache import caches  # type: ignore

        from .otp import OtpStore

        self.otp_store = OtpStore(
            caches[settings.OTP_CACHE_ALIAS],
            ttl_seconds=settings.OTP_TTL_SECONDS,
            max_attempts=settings.OTP_MAX_ATTEMPTS,
        )


def get_otp_store():
    from django.apps import apps  # type: ignore

    return apps.get_app_config("users").otp_store
