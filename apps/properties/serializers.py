"""Serializers for the properties domain."""

from __future__ import annotations

from django.core.validators import URLValidator
from rest_framework import serializers  # type: ignore

from apps.destinations.models import Destination, Region

from .models import Amenity, Property, PropertyMedia


class AmenitySerializer(serializers.ModelSerializer):
    class Meta:
        model = Amenity
        fields = ["id", "name", "slug", "icon"]


class PropertyMediaSerializer(serializers.ModelSerializer):
    class Meta:
        model = PropertyMedia
        fields = ["id", "media_type", "url", "key", "caption", "is_primary", "order", "uploaded_at"]
        read_only_fields = ["id", "order", "uploaded_at"]


class PropertyMediaInputSerializer(serializers.Serializer):
    url = serializers.URLField(max_length=1000, validators=[URLValidator(schemes=["http", "https"])])
    key = serializers.CharField(max_length=500, required=False, allow_blank=True)
    media_type = serializers.ChoiceField(choices=PropertyMedia.MediaType.choices, required=False)
    caption = serializers.CharField(max_length=255, required=False, allow_blank=True)
    is_primary = serializers.BooleanField(required=False, default=False)


class PropertyOwnerSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    first_name = serializers.CharField()
    last_name = serializers.CharField()
    role = serializers.CharField()


class PropertySerializer(serializers.ModelSerializer):
    owner = PropertyOwnerSerializer(read_only=True)
    amenities = AmenitySerializer(many=True, read_only=True)
    media = PropertyMediaSerializer(many=True, read_only=True)
    region_name = serializers.CharField(source="region.name", read_only=True, default=None)
    destination_name = serializers.CharField(source="destination.name", read_only=True, default=None)

    class Meta:
        model = Property
        fields = [
            "id",
            "slug",
            "title",
            "description",
            "location",
            "city",
            "country",
            "address",
            "latitude",
            "longitude",
            "price",
            "price_per_night",
            "max_guests",
            "bedrooms",
            "bathrooms",
            "property_type",
            "instant_booking",
            "status",
            "is_featured",
            "average_rating",
            "review_count",
            "region",
            "region_name",
            "destination",
            "destination_name",
            "amenities",
            "media",
            "owner",
            "published_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class PropertyManageSerializer(PropertySerializer):
    """Для владельца и администратора: видны заметки модерации и фиды."""

    class Meta(PropertySerializer.Meta):
        fields = PropertySerializer.Meta.fields + ["admin_notes", "ical_urls"]
        read_only_fields = fields


class PropertyWriteSerializer(serializers.ModelSerializer):
    amenities = serializers.SlugRelatedField(
        slug_field="slug",
        queryset=Amenity.objects.all(),
        many=True,
        required=False,
    )
    media = PropertyMediaInputSerializer(many=True, required=False)
    region = serializers.PrimaryKeyRelatedField(
        queryset=Region.objects.filter(is_active=True), required=False, allow_null=True
    )
    destination = serializers.PrimaryKeyRelatedField(
        queryset=Destination.objects.filter(is_active=True), required=False, allow_null=True
    )

    class Meta:
        model = Property
        fields = [
            "title",
            "description",
            "location",
            "city",
            "country",
            "address",
            "latitude",
            "longitude",
            "price",
            "price_per_night",
            "amenities",
            "media",
            "max_guests",
            "bedrooms",
            "bathrooms",
            "property_type",
            "instant_booking",
            "region",
            "destination",
        ]
        extra_kwargs = {
            "title": {"min_length": 5},
            "description": {"min_length": 20, "max_length": 2000},
            "location": {"min_length": 5},
            "city": {"min_length": 2},
            "country": {"min_length": 2},
            "address": {"min_length": 10},
        }

    def validate(self, attrs):  # type: ignore
        destination = attrs.get("destination")
        region = attrs.get("region")
        if destination is not None and region is not None and destination.region_id != region.pk:
            raise serializers.ValidationError({"destination": "Destination does not belong to the selected region."})
        if destination is not None and region is None and "region" not in attrs:
            attrs["region"] = destination.region
        return attrs


class PropertyMediaChangeSerializer(serializers.Serializer):
    media = PropertyMediaInputSerializer(many=True, allow_empty=False)


class PropertyMediaRemoveSerializer(serializers.Serializer):
    media = serializers.ListField(child=serializers.URLField(max_length=1000), min_length=1)


class AvailabilityQuerySerializer(serializers.Serializer):
    start_date = serializers.DateTimeField()
    end_date = serializers.DateTimeField()

    def validate(self, attrs):  # type: ignore
        if attrs["end_date"] <= attrs["start_date"]:
            raise serializers.ValidationError({"end_date": "Must be after start_date."})
        return attrs


class PropertyModerationSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[(s.value, s.label) for s in Property.MODERATION_STATUSES])
    admin_notes = serializers.CharField(max_length=1000, required=False, allow_blank=True)


class CitySerializer(serializers.Serializer):
    city = serializers.CharField()
    country = serializers.CharField()
    property_count = serializers.IntegerField()
