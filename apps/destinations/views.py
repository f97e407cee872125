"""Public and admin API for regions and destinations."""

from __future__ import annotations

from django.db.models import Count, Prefetch, Q  # type: ignore
from django.shortcuts import get_object_or_404  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import filters, permissions  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.users.permissions import IsAdmin
from shared.api.responses import success_response
from shared.api.views import EnvelopeModelViewSet

from .models import Destination, Region
from .serializers import DestinationSerializer, RegionSerializer, RegionTreeSerializer
from .services import delete_region


def _destinations_with_counts():
    return Destination.objects.select_related("region").annotate(
        property_count=Count("properties", filter=Q(properties__status="LIVE"))
    )


class RegionTreeView(APIView):
    """Top-level active regions with nested children and destinations."""

    permission_classes = [permissions.AllowAny]

    def get(self, request):  # type: ignore
        regions = (
            Region.objects.filter(is_active=True, parent__isnull=True)
            .prefetch_related(Prefetch("destinations", queryset=_destinations_with_counts()))
            .order_by("sort_order", "name")
        )
        data = RegionTreeSerializer(regions, many=True, context={"request": request}).data
        return success_response(data, message="Regions with destinations retrieved successfully")


class RegionDestinationsView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request, slug: str):  # type: ignore
        region = get_object_or_404(Region, slug=slug, is_active=True)
        destinations = _destinations_with_counts().filter(region=region, is_active=True)
        return success_response(
            DestinationSerializer(destinations, many=True).data,
            message="Destinations retrieved successfully",
        )


class AdminRegionViewSet(EnvelopeModelViewSet):
    """CRUD регионов для администраторов."""

    serializer_class = RegionSerializer
    permission_classes = [IsAdmin]
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ["name", "slug"]
    ordering_fields = ["name", "sort_order", "created_at"]
    envelope_messages = {
        "create": "Region created successfully",
        "update": "Region updated successfully",
        "partial_update": "Region updated successfully",
        "destroy": "Region deleted successfully",
    }

    def get_queryset(self):  # type: ignore
        return Region.objects.annotate(destination_count=Count("destinations"))

    def perform_destroy(self, instance):  # type: ignore
        delete_region(instance)


class AdminDestinationViewSet(EnvelopeModelViewSet):
    serializer_class = DestinationSerializer
    permission_classes = [IsAdmin]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ["region", "is_active"]
    search_fields = ["name", "slug"]
    ordering_fields = ["name", "sort_order", "created_at"]
    envelope_messages = {
        "create": "Destination created successfully",
        "update": "Destination updated successfully",
        "partial_update": "Destination updated successfully",
        "destroy": "Destination deleted successfully",
    }

    def get_queryset(self):  # type: ignore
        return _destinations_with_counts()
