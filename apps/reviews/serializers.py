"""Serializers for reviews.

Rating is limited to 1..5, the comment to 10..500 characters. The author
is taken from the request in the view.
"""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import COMMENT_MAX_LENGTH, COMMENT_MIN_LENGTH, Review


class ReviewAuthorSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    first_name = serializers.CharField()
    last_name = serializers.CharField()


class ReviewSerializer(serializers.ModelSerializer):
    """Read serializer for reviews including related ids."""

    user = ReviewAuthorSerializer(read_only=True)
    property_id = serializers.ReadOnlyField(source="property.id")
    property_title = serializers.ReadOnlyField(source="property.title")
    booking_id = serializers.ReadOnlyField()

    class Meta:
        model = Review
        fields = [
            "id",
            "user",
            "property_id",
            "property_title",
            "booking_id",
            "rating",
            "comment",
            "is_verified",
            "admin_response",
            "admin_response_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ReviewWriteSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = serializers.CharField(min_length=COMMENT_MIN_LENGTH, max_length=COMMENT_MAX_LENGTH)


class ReviewCreateSerializer(ReviewWriteSerializer):
    booking_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)


class AdminResponseSerializer(serializers.Serializer):
    admin_response = serializers.CharField(min_length=5, max_length=1000, trim_whitespace=True)


class ReviewSummarySerializer(serializers.Serializer):
    total_reviews = serializers.IntegerField()
    average_rating = serializers.FloatField()
    rating_distribution = serializers.DictField(child=serializers.IntegerField())
