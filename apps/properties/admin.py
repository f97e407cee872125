"""Admin registrations for properties domain."""

from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import Amenity, Property, PropertyMedia


@admin.register(Amenity)
class AmenityAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "icon")
    search_fields = ("name", "slug")


class PropertyMediaInline(admin.TabularInline):
    model = PropertyMedia
    extra = 0
    fields = ("media_type", "url", "caption", "order", "is_primary")


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "city",
        "country",
        "property_type",
        "status",
        "price",
        "max_guests",
        "owner",
        "created_at",
    )
    list_filter = ("status", "property_type", "instant_booking", "is_featured", "country")
    search_fields = ("title", "city", "address", "owner__email")
    raw_id_fields = ("owner", "reviewed_by")
    readonly_fields = ("slug", "average_rating", "review_count", "published_at", "created_at", "updated_at")
    inlines = [PropertyMediaInline]
