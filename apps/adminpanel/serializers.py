from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.users.serializers import AdminUserSerializer


class AdminUserListSerializer(AdminUserSerializer):
    property_count = serializers.IntegerField(read_only=True, default=0)
    booking_count = serializers.IntegerField(read_only=True, default=0)
    review_count = serializers.IntegerField(read_only=True, default=0)

    class Meta(AdminUserSerializer.Meta):
        fields = AdminUserSerializer.Meta.fields + ["property_count", "booking_count", "review_count"]


class AnalyticsQuerySerializer(serializers.Serializer):
    period = serializers.ChoiceField(choices=["7d", "30d", "90d", "1y"], required=False, default="30d")


class HealthSerializer(serializers.Serializer):
    status = serializers.CharField()
    timestamp = serializers.DateTimeField()
    services = serializers.DictField(child=serializers.CharField())
