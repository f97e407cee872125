"""Admin API: users, moderation queue, plans, analytics and health."""

from __future__ import annotations

import structlog  # type: ignore
from django.db.models import Count  # type: ignore
from django.shortcuts import get_object_or_404  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import filters, mixins, permissions, status, viewsets  # type: ignore
from rest_framework.settings import api_settings  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.properties.models import Property
from apps.properties.serializers import PropertyManageSerializer, PropertyModerationSerializer
from apps.properties.services import moderate_property
from apps.subscriptions.models import SubscriptionPlan
from apps.subscriptions.serializers import (
    SubscriptionFlagsSerializer,
    SubscriptionPlanSerializer,
    SubscriptionSerializer,
)
from apps.subscriptions.services import set_subscription_flags
from apps.users.models import User
from apps.users.permissions import IsAdmin, IsSuperAdminOrReadOnly
from shared.api.pagination import paginate
from shared.api.responses import success_response
from shared.api.views import EnvelopeMixin, EnvelopeModelViewSet

from . import services
from .serializers import AdminUserListSerializer, AnalyticsQuerySerializer, HealthSerializer

logger = structlog.get_logger(__name__)


class AdminUserViewSet(
    EnvelopeMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """Управление пользователями; назначать админские роли может только супер-админ."""

    serializer_class = AdminUserListSerializer
    permission_classes = [IsAdmin]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ["role", "is_active"]
    search_fields = ["email", "first_name", "last_name", "phone"]
    ordering_fields = ["created_at", "email", "last_login"]
    envelope_messages = {
        "list": "Users retrieved successfully",
        "retrieve": "User retrieved successfully",
        "update": "User updated successfully",
        "partial_update": "User updated successfully",
    }

    def get_queryset(self):  # type: ignore
        return User.objects.annotate(
            property_count=Count("properties", distinct=True),
            booking_count=Count("bookings", distinct=True),
            review_count=Count("reviews", distinct=True),
        ).order_by("-created_at")

    def perform_update(self, serializer):  # type: ignore
        user = serializer.save()
        logger.info("admin.user_updated", user_id=user.pk, admin_id=self.request.user.pk)

    def destroy(self, request, *args, **kwargs):  # type: ignore
        services.delete_user(request.user, self.get_object())
        return success_response(message="User deleted successfully")


class PropertyQueueView(APIView):
    permission_classes = [IsAdmin]

    def get(self, request):  # type: ignore
        queryset = (
            Property.objects.filter(status=Property.Status.PENDING)
            .select_related("owner", "region", "destination")
            .prefetch_related("media", "amenities")
            .order_by("created_at")
        )
        return paginate(self, queryset, PropertyManageSerializer, message="Property approval queue retrieved successfully")


class PropertyApproveView(APIView):
    permission_classes = [IsAdmin]

    def put(self, request, pk: int):  # type: ignore
        property_obj = get_object_or_404(Property, pk=pk)
        serializer = PropertyModerationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        property_obj = moderate_property(property_obj, data["status"], request.user, data.get("admin_notes"))
        return success_response(
            PropertyManageSerializer(property_obj, context={"request": request}).data,
            message=f"Property {data['status'].lower()} successfully",
        )


class SubscriptionPlanAdminViewSet(EnvelopeModelViewSet):
    """Тарифы: читать может любой администратор, изменять только супер-админ."""

    queryset = SubscriptionPlan.objects.order_by("price")
    serializer_class = SubscriptionPlanSerializer
    permission_classes = [IsAdmin, IsSuperAdminOrReadOnly]
    envelope_messages = {
        "list": "Subscription plans retrieved successfully",
        "retrieve": "Subscription plan retrieved successfully",
        "create": "Subscription plan created successfully",
        "update": "Subscription plan updated successfully",
        "partial_update": "Subscription plan updated successfully",
        "destroy": "Subscription plan deleted successfully",
    }

    def perform_destroy(self, instance):  # type: ignore
        services.delete_plan(instance)


class SubscriptionFlagsView(APIView):
    permission_classes = [IsAdmin]

    def patch(self, request, pk: int):  # type: ignore
        serializer = SubscriptionFlagsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        subscription = set_subscription_flags(pk, **serializer.validated_data)
        logger.info("admin.subscription_flags", subscription_id=pk, admin_id=request.user.pk, **serializer.validated_data)
        return success_response(SubscriptionSerializer(subscription).data, message="Subscription updated successfully")


class AnalyticsView(APIView):
    permission_classes = [IsAdmin]

    def get(self, request):  # type: ignore
        query = AnalyticsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        data = services.platform_analytics(query.validated_data["period"])
        return success_response(data, message="Platform analytics retrieved successfully")


class HealthView(APIView):
    """Liveness: база данных и настройки объектного хранилища."""

    authentication_classes: list = []
    permission_classes = [permissions.AllowAny]

    def get(self, request):  # type: ignore
        health = services.system_health()
        if health["status"] == "healthy":
            logger.info("healthz.ok", **health["services"])
            status_code = status.HTTP_200_OK
        else:
            logger.warning("healthz.degraded", **health["services"])
            status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return success_response(
            HealthSerializer(health).data,
            message="System health check completed",
            status_code=status_code,
        )


class AdminHealthView(HealthView):
    authentication_classes = api_settings.DEFAULT_AUTHENTICATION_CLASSES
    permission_classes = [IsAdmin]
