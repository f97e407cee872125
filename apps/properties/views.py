"""Property API views."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import filters, permissions, status  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.ical.apps import get_feed_refresher, get_ical_cache
from apps.users.permissions import IsHost
from shared.api.pagination import paginate
from shared.api.responses import success_response
from shared.api.views import EnvelopeModelViewSet

from . import services
from .filters import PropertyFilterSet
from .models import Property
from .serializers import (
    AvailabilityQuerySerializer,
    CitySerializer,
    PropertyManageSerializer,
    PropertyMediaChangeSerializer,
    PropertyMediaRemoveSerializer,
    PropertyMediaSerializer,
    PropertySerializer,
    PropertyWriteSerializer,
)


class IsPropertyManager(permissions.BasePermission):
    """Позволяет управлять объектом его владельцу и администраторам."""

    def has_object_permission(self, request, view, obj: Property):  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        return obj.is_managed_by(request.user)


class PropertyFilterBackend(DjangoFilterBackend):
    """Передаёт в FilterSet кэш внешних календарей."""

    def get_filterset_kwargs(self, request, queryset, view):  # type: ignore
        kwargs = super().get_filterset_kwargs(request, queryset, view)
        kwargs["ical_cache"] = get_ical_cache()
        return kwargs


class PropertyViewSet(EnvelopeModelViewSet):
    """Viewset для управления объектами размещения."""

    permission_classes = [permissions.IsAuthenticatedOrReadOnly, IsPropertyManager]
    filter_backends = [PropertyFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = PropertyFilterSet
    search_fields = ["title", "description", "location", "city", "country"]
    ordering_fields = ["price", "created_at", "average_rating", "title", "max_guests"]
    ordering = ["-is_featured", "-created_at"]
    envelope_messages = {
        "list": "Properties retrieved successfully",
        "retrieve": "Property retrieved successfully",
        "destroy": "Property deleted successfully",
    }

    def get_permissions(self):  # type: ignore
        if self.action in {"list", "retrieve", "cities", "availability"}:
            return [permissions.AllowAny()]
        if self.action in {"create", "user_list"}:
            return [IsHost()]
        return super().get_permissions()

    def get_queryset(self):  # type: ignore
        if self.action == "list":
            queryset = Property.objects.live()
        else:
            queryset = services.visible_to(self.request.user)
        return queryset.select_related("owner", "region", "destination").prefetch_related("amenities", "media")

    def get_serializer_class(self):  # type: ignore
        if self.action in {"create", "update", "partial_update"}:
            return PropertyWriteSerializer
        return PropertySerializer

    def _manage_data(self, property_obj: Property):
        return PropertyManageSerializer(property_obj, context=self.get_serializer_context()).data

    def list(self, request, *args, **kwargs):  # type: ignore
        response = super().list(request, *args, **kwargs)
        if settings.ICAL_REFRESH_ON_LIST:
            get_feed_refresher().trigger(settings.ICAL_CACHE_TTL_MS)
        return response

    def retrieve(self, request, *args, **kwargs):  # type: ignore
        property_obj = self.get_object()
        if property_obj.is_managed_by(request.user):
            data = self._manage_data(property_obj)
        else:
            data = PropertySerializer(property_obj, context=self.get_serializer_context()).data
        return Response(data)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        property_obj = services.create_property(request.user, serializer.validated_data)
        return success_response(
            self._manage_data(property_obj),
            message="Property created successfully and is pending review",
            status_code=status.HTTP_201_CREATED,
        )

    def update(self, request, *args, **kwargs):  # type: ignore
        property_obj = self.get_object()
        serializer = self.get_serializer(property_obj, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        property_obj = services.update_property(property_obj, serializer.validated_data)
        return success_response(self._manage_data(property_obj), message="Property updated successfully")

    def perform_destroy(self, instance):  # type: ignore
        services.delete_property(instance)

    @action(detail=False, methods=["get"])
    def cities(self, request):  # type: ignore
        data = CitySerializer(services.popular_cities(), many=True).data
        return success_response(data, message="Popular cities retrieved successfully")

    @action(detail=False, methods=["get"], url_path="user/list")
    def user_list(self, request):  # type: ignore
        queryset = (
            Property.objects.managed_by(request.user)
            .select_related("owner", "region", "destination")
            .prefetch_related("amenities", "media")
            .order_by("-created_at")
        )
        status_filter = request.query_params.get("status")
        if status_filter:
            queryset = queryset.filter(status=status_filter.upper())
        return paginate(self, queryset, PropertyManageSerializer, message="User properties retrieved successfully")

    @action(detail=True, methods=["post", "delete"])
    def media(self, request, pk=None):  # type: ignore
        property_obj = self.get_object()
        if request.method == "DELETE":
            serializer = PropertyMediaRemoveSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            services.remove_media(property_obj, serializer.validated_data["media"])
            message = "Media removed from property successfully"
        else:
            serializer = PropertyMediaChangeSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            services.add_media(property_obj, serializer.validated_data["media"])
            message = "Media added to property successfully"
        return success_response(
            PropertyMediaSerializer(property_obj.media.all(), many=True).data,
            message=message,
        )

    @action(detail=True, methods=["get"])
    def availability(self, request, pk=None):  # type: ignore
        property_obj = self.get_object()
        serializer = AvailabilityQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        result = services.check_availability(
            property_obj,
            serializer.validated_data["start_date"],
            serializer.validated_data["end_date"],
            ical_cache=get_ical_cache(),
        )
        return success_response(result, message="Availability checked successfully")
