from __future__ import annotations

from django.apps import AppConfig  # type: ignore


class DestinationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.destinations"
    label = "destinations"
    verbose_name = "Destinations"
