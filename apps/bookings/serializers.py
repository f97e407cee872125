"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.finances.serializers import PaymentSerializer

from .models import Booking


class BookingPropertySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    title = serializers.CharField()
    slug = serializers.CharField()
    city = serializers.CharField()
    country = serializers.CharField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2)


class BookingGuestSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    email = serializers.EmailField()
    first_name = serializers.CharField()
    last_name = serializers.CharField()


class BookingSerializer(serializers.ModelSerializer):
    property = BookingPropertySerializer(read_only=True)
    user = BookingGuestSerializer(read_only=True)
    payment = PaymentSerializer(read_only=True)

    class Meta:
        model = Booking
        fields = [
            "id",
            "booking_code",
            "property",
            "user",
            "start_date",
            "end_date",
            "nights",
            "guests",
            "amount",
            "status",
            "payment_status",
            "special_requests",
            "cancellation_reason",
            "cancelled_at",
            "confirmed_at",
            "admin_notes",
            "payment",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class BookingCreateSerializer(serializers.Serializer):
    property_id = serializers.IntegerField(min_value=1)
    start_date = serializers.DateTimeField()
    end_date = serializers.DateTimeField()
    guests = serializers.IntegerField(min_value=1, default=1)
    special_requests = serializers.CharField(max_length=1000, required=False, allow_blank=True, default="")


class BookingUpdateSerializer(serializers.Serializer):
    start_date = serializers.DateTimeField(required=False)
    end_date = serializers.DateTimeField(required=False)
    guests = serializers.IntegerField(min_value=1, required=False)
    special_requests = serializers.CharField(max_length=1000, required=False, allow_blank=True)


class BookingCancelSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")


class BookingConfirmSerializer(serializers.Serializer):
    notes = serializers.CharField(max_length=1000, required=False, allow_blank=True, default="")


class BookingMarkPaidSerializer(serializers.Serializer):
    transaction_id = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    provider = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")


class StepResultSerializer(serializers.Serializer):
    ok = serializers.BooleanField()
    skipped = serializers.BooleanField()
    error = serializers.CharField(allow_null=True)


class OwnerAggregatesSerializer(serializers.Serializer):
    total_bookings = serializers.IntegerField()
    by_status = serializers.DictField(child=serializers.IntegerField())
    upcoming = serializers.IntegerField()
    paid_revenue = serializers.DecimalField(max_digits=14, decimal_places=2)
