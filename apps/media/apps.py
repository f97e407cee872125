from __future__ import annotations

from django.apps import AppConfig  # type: ignore


class MediaConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.media"
    label = "media"
    verbose_name = "Media"

    storage = None

    def ready(self) -> None:
        from .storage import ObjectStorage

        self.storage = ObjectStorage.from_settings()


def get_object_storage():
    from django.apps import apps  # type: ignore

    return apps.get_app_config("media").storage
