"""Serializers for subscription plans and owner subscriptions."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Subscription, SubscriptionPlan


class SubscriptionPlanSerializer(serializers.ModelSerializer):
    class Meta:
        model = SubscriptionPlan
        fields = [
            "id",
            "name",
            "type",
            "price",
            "duration_days",
            "max_properties",
            "features",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]


class SubscriptionSerializer(serializers.ModelSerializer):
    plan_name = serializers.CharField(source="plan.name", read_only=True)
    owner_email = serializers.EmailField(source="owner.email", read_only=True)

    class Meta:
        model = Subscription
        fields = [
            "id",
            "owner",
            "owner_email",
            "plan",
            "plan_name",
            "type",
            "price",
            "features",
            "max_properties",
            "is_active",
            "paid",
            "expires_at",
            "cancelled_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class SubscriptionCreateSerializer(serializers.Serializer):
    plan_id = serializers.IntegerField(min_value=1)


class SubscriptionFlagsSerializer(serializers.Serializer):
    """PATCH администратором: хотя бы одно из полей обязательно."""

    paid = serializers.BooleanField(required=False)
    is_active = serializers.BooleanField(required=False)

    def validate(self, attrs):  # type: ignore
        if not attrs:
            raise serializers.ValidationError("Provide paid and/or is_active")
        return attrs


class SubscriptionDetailsSerializer(serializers.Serializer):
    subscription = SubscriptionSerializer()
    property_count = serializers.IntegerField()
    remaining_properties = serializers.IntegerField()


class SubscriptionUsageSerializer(SubscriptionDetailsSerializer):
    max_properties = serializers.IntegerField()
    usage_percentage = serializers.IntegerField()
