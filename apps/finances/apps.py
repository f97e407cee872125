from __future__ import annotations

from django.apps import AppConfig  # type: ignore


class FinancesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.finances"
    label = "finances"
    verbose_name = "Finances"
