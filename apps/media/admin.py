from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import UploadToken


@admin.register(UploadToken)
class UploadTokenAdmin(admin.ModelAdmin):
    list_display = ("key", "user", "content_type", "expires_at", "used_at")
    search_fields = ("key", "user__email")
    raw_id_fields = ("user",)
