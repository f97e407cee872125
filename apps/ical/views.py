"""Calendar sync and export endpoints."""

from __future__ import annotations

import logging
from datetime import timezone as dt_timezone

from django.conf import settings  # type: ignore
from django.http import HttpResponse  # type: ignore
from django.shortcuts import get_object_or_404  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.dateparse import parse_datetime  # type: ignore
from rest_framework import permissions  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.bookings.models import Booking
from apps.properties.models import Property
from shared.api.responses import success_response
from shared.domain.errors import DomainValidationError, ForbiddenError, NotFoundError

from . import export, feeds
from .apps import get_ical_cache
from .serializers import IcalEventSerializer, IcalSyncSerializer

logger = logging.getLogger(__name__)


def _calendar_response(payload: bytes, filename: str) -> HttpResponse:
    response = HttpResponse(payload, content_type=export.CALENDAR_CONTENT_TYPE)
    response["Content-Disposition"] = f'attachment; filename="{filename}"'
    return response


class IcalSyncView(APIView):
    """POST: загрузить внешние календари объекта в кэш."""

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk: int):  # type: ignore
        property_obj = get_object_or_404(Property, pk=pk)
        if not property_obj.is_managed_by(request.user):
            raise ForbiddenError("You can only sync calendars of your own properties")

        serializer = IcalSyncSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        urls = serializer.validated_data["urls"]
        cache = get_ical_cache()

        if not serializer.validated_data["force"] and cache.is_fresh(property_obj.pk, settings.ICAL_CACHE_TTL_MS):
            return success_response(cache.get_meta(property_obj.pk), message="Cache is fresh")

        fetched = feeds.fetch_feeds(urls)
        cache.upsert_merged(property_obj.pk, urls, fetched)

        known = list(property_obj.ical_urls or [])
        new_urls = [url for url in urls if url not in known]
        if new_urls:
            property_obj.ical_urls = known + new_urls
            property_obj.save(update_fields=["ical_urls", "updated_at"])

        logger.info("Synced %s iCal feeds for property %s", len(fetched), property_obj.pk)
        return success_response(cache.get_meta(property_obj.pk), message="iCal synced")


class IcalBlocksView(APIView):
    """GET ?from=&to= : внешние занятые окна из кэша."""

    permission_classes = [permissions.AllowAny]

    def get(self, request, pk: int):  # type: ignore
        get_object_or_404(Property, pk=pk)
        cache = get_ical_cache()
        entry = cache.get(pk)
        if entry is None:
            return success_response([], message="No cached iCal")

        start, end = request.query_params.get("from"), request.query_params.get("to")
        if not start or not end:
            events = entry["events"]
            message = "All cached events"
        else:
            start_dt, end_dt = parse_datetime(start), parse_datetime(end)
            if start_dt is None or end_dt is None:
                raise DomainValidationError("from and to must be ISO 8601 datetimes")
            events = cache.blocks_between(pk, _aware(start_dt), _aware(end_dt))
            message = "Cached events in range"
        return success_response(IcalEventSerializer(events, many=True).data, message=message)


def _aware(value):
    if timezone.is_naive(value):
        return timezone.make_aware(value, dt_timezone.utc)
    return value


class PropertyAvailabilityIcsView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request, pk: int):  # type: ignore
        property_obj = get_object_or_404(Property, pk=pk)
        bookings = property_obj.bookings.active().order_by("start_date")
        payload = export.property_availability_calendar(property_obj, bookings)
        return _calendar_response(payload, f"property-{property_obj.pk}-availability.ics")


class BookingIcsView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk: int):  # type: ignore
        booking = Booking.objects.select_related("property").filter(pk=pk).first()
        if booking is None or not booking.can_be_viewed_by(request.user):
            raise NotFoundError("Booking not found")
        return _calendar_response(export.booking_calendar(booking), f"booking-{booking.pk}.ics")
