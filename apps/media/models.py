"""Одноразовые токены для загрузки файлов по выданной ссылке."""

from __future__ import annotations

import secrets

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


def generate_upload_token() -> str:
    return secrets.token_urlsafe(32)


class UploadToken(models.Model):
    token = models.CharField(max_length=64, unique=True, default=generate_upload_token, editable=False)
    key = models.CharField(max_length=500, help_text=_("Object key the upload will be stored under."))
    content_type = models.CharField(max_length=100)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="upload_tokens")
    expires_at = models.DateTimeField()
    used_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Upload token")
        verbose_name_plural = _("Upload tokens")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"UploadToken {self.key}"

    def is_usable(self, now=None) -> bool:
        now = now or timezone.now()
        return self.used_at is None and self.expires_at > now
