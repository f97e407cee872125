"""URL declarations for the subscriptions app."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import (
    SubscriptionCreateView,
    SubscriptionDetailView,
    SubscriptionPlanListView,
    SubscriptionUsageView,
    UserSubscriptionView,
)

urlpatterns = [
    path("", SubscriptionCreateView.as_view(), name="subscription-create"),
    path("plans/", SubscriptionPlanListView.as_view(), name="subscription-plans"),
    path("user/", UserSubscriptionView.as_view(), name="subscription-user"),
    path("usage/", SubscriptionUsageView.as_view(), name="subscription-usage"),
    path("<int:pk>/", SubscriptionDetailView.as_view(), name="subscription-detail"),
]
