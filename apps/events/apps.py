from __future__ import annotations

from django.apps import AppConfig  # type: ignore


class EventsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.events"
    label = "events"
    verbose_name = "Events"
