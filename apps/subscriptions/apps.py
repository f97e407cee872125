from __future__ import annotations

from django.apps import AppConfig  # type: ignore


class SubscriptionsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.subscriptions"
    label = "subscriptions"
    verbose_name = "Subscriptions"
