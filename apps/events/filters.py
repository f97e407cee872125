from __future__ import annotations

import django_filters  # type: ignore
from django.db.models import Q  # type: ignore

from .models import Event


class EventFilterSet(django_filters.FilterSet):
    category = django_filters.CharFilter(field_name="category", lookup_expr="iexact")
    city = django_filters.CharFilter(field_name="city", lookup_expr="icontains")
    country = django_filters.CharFilter(field_name="country", lookup_expr="icontains")
    search = django_filters.CharFilter(method="filter_search")
    start_from = django_filters.IsoDateTimeFilter(field_name="start_datetime", lookup_expr="gte")
    end_to = django_filters.IsoDateTimeFilter(field_name="end_datetime", lookup_expr="lte")

    class Meta:
        model = Event
        fields = ["category", "city", "country"]

    def filter_search(self, queryset, name, value):  # type: ignore
        return queryset.filter(
            Q(title__icontains=value)
            | Q(description__icontains=value)
            | Q(venue__icontains=value)
        )
