from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import Event


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ("title", "category", "city", "start_datetime", "end_datetime", "is_active")
    list_filter = ("category", "is_active", "country")
    search_fields = ("title", "description", "venue", "city")
    date_hierarchy = "start_datetime"
