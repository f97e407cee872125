from __future__ import annotations

from django.apps import AppConfig  # type: ignore


class IcalConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.ical"
    label = "ical"
    verbose_name = "Calendar sync"

    cache = None
    refresher = None

    def ready(self) -> None:
        from .cache import IcalCache
        from .feeds import StaleFeedRefresher

        self.cache = IcalCache()
        self.refresher = StaleFeedRefresher(self.cache)


def get_ical_cache():
    from django.apps import apps  # type: ignore

    return apps.get_app_config("ical").cache


def get_feed_refresher():
    from django.apps import apps  # type: ignore

    return apps.get_app_config("ical").refresher
