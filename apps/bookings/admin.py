"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "booking_code",
        "property",
        "user",
        "status",
        "payment_status",
        "start_date",
        "end_date",
        "amount",
        "created_at",
    )
    list_filter = ("status", "payment_status", "start_date")
    search_fields = ("booking_code", "property__title", "user__email")
    raw_id_fields = ("user", "property")
    readonly_fields = (
        "booking_code",
        "nights",
        "amount",
        "cancelled_at",
        "confirmed_at",
        "created_at",
        "updated_at",
    )
