"""Serializers for payments."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Payment
        fields = [
            "id",
            "status",
            "amount",
            "currency",
            "provider",
            "transaction_id",
            "paid_at",
            "refunded_at",
            "created_at",
        ]
        read_only_fields = fields
