from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import Review


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ("property", "user", "rating", "is_verified", "created_at")
    list_filter = ("rating", "is_verified")
    search_fields = ("property__title", "user__email", "comment")
    raw_id_fields = ("user", "property", "booking")
