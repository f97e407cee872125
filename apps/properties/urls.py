"""URL routing for the properties domain."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from apps.ical.views import IcalBlocksView, IcalSyncView, PropertyAvailabilityIcsView

from .views import PropertyViewSet

router = DefaultRouter()
router.register(r"", PropertyViewSet, basename="property")

urlpatterns = [
    # External calendar sync and export
    path("<int:pk>/ical/sync/", IcalSyncView.as_view(), name="property-ical-sync"),
    path("<int:pk>/ical/blocks/", IcalBlocksView.as_view(), name="property-ical-blocks"),
    path("<int:pk>/availability.ics", PropertyAvailabilityIcsView.as_view(), name="property-availability-ics"),
    path("", include(router.urls)),
]
