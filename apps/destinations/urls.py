"""URL declarations for the destinations app."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import (
    AdminDestinationViewSet,
    AdminRegionViewSet,
    RegionDestinationsView,
    RegionTreeView,
)

router = DefaultRouter()
router.register(r"admin/regions", AdminRegionViewSet, basename="admin-region")
router.register(r"admin/destinations", AdminDestinationViewSet, basename="admin-destination")

urlpatterns = [
    path("regions/", RegionTreeView.as_view(), name="region-tree"),
    path("regions/<slug:slug>/destinations/", RegionDestinationsView.as_view(), name="region-destinations"),
    path("", include(router.urls)),
]
