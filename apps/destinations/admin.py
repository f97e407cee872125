from __future__ import annotations

from django.contrib import admin  # type: ignore
from mptt.admin import MPTTModelAdmin  # type: ignore

from .models import Destination, Region


@admin.register(Region)
class RegionAdmin(MPTTModelAdmin):
    list_display = ("name", "slug", "sort_order", "is_active")
    list_filter = ("is_active",)
    search_fields = ("name", "slug")
    prepopulated_fields = {"slug": ("name",)}


@admin.register(Destination)
class DestinationAdmin(admin.ModelAdmin):
    list_display = ("name", "region", "slug", "sort_order", "is_active")
    list_filter = ("region", "is_active")
    search_fields = ("name", "slug")
    prepopulated_fields = {"slug": ("name",)}
