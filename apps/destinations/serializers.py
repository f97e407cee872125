"""Serializers for regions and destinations."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Destination, Region


class DestinationSerializer(serializers.ModelSerializer):
    region_name = serializers.CharField(source="region.name", read_only=True)
    property_count = serializers.IntegerField(read_only=True, default=0)

    class Meta:
        model = Destination
        fields = [
            "id",
            "region",
            "region_name",
            "name",
            "slug",
            "description",
            "image_url",
            "sort_order",
            "is_active",
            "property_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]
        extra_kwargs = {"slug": {"required": False}}


class RegionSerializer(serializers.ModelSerializer):
    """Плоское представление региона для админки."""

    destination_count = serializers.IntegerField(read_only=True, default=0)

    class Meta:
        model = Region
        fields = [
            "id",
            "parent",
            "name",
            "slug",
            "description",
            "image_url",
            "sort_order",
            "is_active",
            "level",
            "destination_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "level", "created_at", "updated_at"]
        extra_kwargs = {"slug": {"required": False}}

    def validate_parent(self, value):  # type: ignore
        if value is not None and self.instance is not None:
            if value.pk == self.instance.pk or value.is_descendant_of(self.instance):
                raise serializers.ValidationError("A region cannot be nested under itself.")
        return value


class RegionTreeSerializer(serializers.ModelSerializer):
    """Публичное дерево: активные дочерние регионы и их направления."""

    destinations = serializers.SerializerMethodField()
    children = serializers.SerializerMethodField()

    class Meta:
        model = Region
        fields = ["id", "name", "slug", "description", "image_url", "sort_order", "destinations", "children"]

    def get_destinations(self, obj):  # type: ignore
        active = [d for d in obj.destinations.all() if d.is_active]
        return DestinationSerializer(sorted(active, key=lambda d: (d.sort_order, d.name)), many=True).data

    def get_children(self, obj):  # type: ignore
        children = [c for c in obj.get_children() if c.is_active]
        return RegionTreeSerializer(children, many=True, context=self.context).data
