from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import Subscription, SubscriptionPlan


@admin.register(SubscriptionPlan)
class SubscriptionPlanAdmin(admin.ModelAdmin):
    list_display = ("name", "type", "price", "duration_days", "max_properties", "is_active")
    list_filter = ("is_active",)
    search_fields = ("name", "type")


@admin.register(Subscription)
class SubscriptionAdmin(admin.ModelAdmin):
    list_display = ("owner", "type", "is_active", "paid", "expires_at", "cancelled_at")
    list_filter = ("is_active", "paid", "type")
    search_fields = ("owner__email",)
    raw_id_fields = ("owner", "plan")
