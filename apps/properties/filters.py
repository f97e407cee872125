"""FilterSet definitions for properties search and listing."""

from __future__ import annotations

import django_filters  # type: ignore
from django.db.models import Count, Q  # type: ignore

from .models import Property


class PropertyFilterSet(django_filters.FilterSet):
    """FilterSet for Property with common filters used in list and search."""

    city = django_filters.CharFilter(field_name="city", lookup_expr="icontains")
    country = django_filters.CharFilter(field_name="country", lookup_expr="icontains")
    property_type = django_filters.ChoiceFilter(choices=Property.PropertyType.choices)
    instant_booking = django_filters.BooleanFilter()

    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")
    min_guests = django_filters.NumberFilter(field_name="max_guests", lookup_expr="gte")

    region = django_filters.CharFilter(method="filter_region")
    destination = django_filters.CharFilter(method="filter_destination")

    # CSV of amenity slugs, requires all selected amenities
    amenities = django_filters.CharFilter(method="filter_amenities")

    start_date = django_filters.IsoDateTimeFilter(method="filter_noop")
    end_date = django_filters.IsoDateTimeFilter(method="filter_noop")

    class Meta:
        model = Property
        fields = [
            "city",
            "country",
            "property_type",
            "instant_booking",
        ]

    def __init__(self, *args, ical_cache=None, **kwargs):  # type: ignore
        super().__init__(*args, **kwargs)
        self.ical_cache = ical_cache

    def filter_noop(self, queryset, name, value):  # type: ignore
        # applied together in filter_queryset
        return queryset

    def filter_region(self, queryset, name, value):  # type: ignore
        if str(value).isdigit():
            return queryset.filter(region_id=int(value))
        return queryset.filter(region__slug=value)

    def filter_destination(self, queryset, name, value):  # type: ignore
        if str(value).isdigit():
            return queryset.filter(destination_id=int(value))
        return queryset.filter(destination__slug=value)

    def filter_amenities(self, queryset, name, value):  # type: ignore
        slugs = [slug for slug in str(value).replace(" ", "").split(",") if slug]
        if not slugs:
            return queryset
        # Require all of the amenities: annotate count of matched amenities
        qs = queryset.filter(amenities__slug__in=slugs).annotate(
            matched_amenities=Count("amenities", filter=Q(amenities__slug__in=slugs), distinct=True)
        ).filter(matched_amenities=len(slugs))
        return qs.distinct()

    def filter_queryset(self, queryset):  # type: ignore
        queryset = super().filter_queryset(queryset)
        start = self.form.cleaned_data.get("start_date")
        end = self.form.cleaned_data.get("end_date")
        if not start or not end or end <= start:
            return queryset

        from apps.bookings.models import Booking

        busy = Booking.objects.active().overlapping(start, end).values("property_id")
        queryset = queryset.exclude(pk__in=busy)
        if self.ical_cache is not None:
            blocked = self.ical_cache.blocked_property_ids(start, end)
            if blocked:
                queryset = queryset.exclude(pk__in=blocked)
        return queryset
