"""URL declarations for the admin panel API."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import (
    AdminHealthView,
    AdminUserViewSet,
    AnalyticsView,
    PropertyApproveView,
    PropertyQueueView,
    SubscriptionFlagsView,
    SubscriptionPlanAdminViewSet,
)

router = DefaultRouter()
router.register(r"users", AdminUserViewSet, basename="admin-user")
router.register(r"subscription-plans", SubscriptionPlanAdminViewSet, basename="admin-subscription-plan")

urlpatterns = [
    path("properties/queue/", PropertyQueueView.as_view(), name="admin-property-queue"),
    path("properties/<int:pk>/approve/", PropertyApproveView.as_view(), name="admin-property-approve"),
    path("subscriptions/<int:pk>/", SubscriptionFlagsView.as_view(), name="admin-subscription-flags"),
    path("analytics/", AnalyticsView.as_view(), name="admin-analytics"),
    path("health/", AdminHealthView.as_view(), name="admin-health"),
    path("", include(router.urls)),
]
