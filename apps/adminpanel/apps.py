from __future__ import annotations

from django.apps import AppConfig  # type: ignore


class AdminPanelConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.adminpanel"
    label = "adminpanel"
    verbose_name = "Admin panel"
