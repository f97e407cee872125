from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("booking", "status", "amount", "currency", "provider", "paid_at", "refunded_at")
    list_filter = ("status", "provider")
    search_fields = ("booking__booking_code", "transaction_id")
    readonly_fields = ("created_at", "updated_at")
