"""Owner-facing subscription endpoints."""

from __future__ import annotations

from rest_framework import permissions, status  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.users.permissions import IsOwnerRole
from shared.api.responses import success_response

from . import services
from .serializers import (
    SubscriptionCreateSerializer,
    SubscriptionDetailsSerializer,
    SubscriptionPlanSerializer,
    SubscriptionSerializer,
    SubscriptionUsageSerializer,
)


class SubscriptionPlanListView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request):  # type: ignore
        plans = services.get_active_plans()
        return success_response(
            SubscriptionPlanSerializer(plans, many=True).data,
            message="Subscription plans retrieved successfully",
        )


class SubscriptionCreateView(APIView):
    permission_classes = [IsOwnerRole]

    def post(self, request):  # type: ignore
        serializer = SubscriptionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        subscription = services.create_subscription(request.user, serializer.validated_data["plan_id"])
        return success_response(
            SubscriptionSerializer(subscription).data,
            message="Subscription created successfully",
            status_code=status.HTTP_201_CREATED,
        )


class SubscriptionDetailView(APIView):
    """PUT меняет тариф, DELETE отменяет подписку."""

    permission_classes = [IsOwnerRole]

    def put(self, request, pk: int):  # type: ignore
        serializer = SubscriptionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        # only the caller's own subscription can be replaced
        services.get_owned_subscription(request.user, pk)
        subscription = services.change_subscription_plan(request.user, serializer.validated_data["plan_id"])
        return success_response(
            SubscriptionSerializer(subscription).data,
            message="Subscription plan changed successfully",
        )

    def delete(self, request, pk: int):  # type: ignore
        subscription = services.cancel_subscription(pk, owner=request.user)
        return success_response(
            SubscriptionSerializer(subscription).data,
            message="Subscription cancelled successfully",
        )


class UserSubscriptionView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):  # type: ignore
        details = services.get_user_subscription(request.user)
        if details is None:
            return success_response(None, message="No active subscription found")
        return success_response(
            SubscriptionDetailsSerializer(details).data,
            message="Subscription retrieved successfully",
        )


class SubscriptionUsageView(APIView):
    permission_classes = [IsOwnerRole]

    def get(self, request):  # type: ignore
        usage = services.get_usage(request.user)
        return success_response(
            SubscriptionUsageSerializer(usage).data,
            message="Subscription usage retrieved successfully",
        )
