"""API views for the booking domain."""

from __future__ import annotations

import logging

from django.db import transaction  # type: ignore
from django.db.models import Q  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore

from apps.properties.models import Property
from apps.users.permissions import IsAdmin, IsHost
from shared.api.pagination import paginate
from shared.api.responses import success_response
from shared.api.views import EnvelopeMixin
from shared.domain.errors import ForbiddenError, NotFoundError

from . import services
from .models import Booking
from .serializers import (
    BookingCancelSerializer,
    BookingConfirmSerializer,
    BookingCreateSerializer,
    BookingMarkPaidSerializer,
    BookingSerializer,
    BookingUpdateSerializer,
    OwnerAggregatesSerializer,
    StepResultSerializer,
)

logger = logging.getLogger(__name__)


def _notify_status_change(booking: Booking) -> None:
    from .tasks import notify_booking_status

    def _send() -> None:
        try:
            notify_booking_status.delay(booking.pk)
        except Exception as exc:  # noqa: BLE001
            logger.error("Failed to queue notification for booking %s: %s", booking.pk, exc, exc_info=True)

    transaction.on_commit(_send)


class IsBookingGuestOrAdmin(permissions.BasePermission):
    """Менять бронь может гость, который её создал, или администратор."""

    def has_object_permission(self, request, view, obj: Booking):  # type: ignore
        return obj.user_id == request.user.id or request.user.is_admin()


class BookingViewSet(
    EnvelopeMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Viewset для создания и управления бронированиями."""

    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated]
    envelope_messages = {
        "list": "Bookings retrieved successfully",
        "retrieve": "Booking retrieved successfully",
    }

    def get_queryset(self):  # type: ignore
        user = self.request.user
        queryset = Booking.objects.select_related("property", "property__owner", "user", "payment")
        if self.action in {"list", "user_list"}:
            return queryset.filter(user=user).order_by("-created_at")
        if user.is_admin():
            return queryset
        # detail routes: guest, or host of the property
        return queryset.filter(Q(user=user) | Q(property__owner=user))

    def get_permissions(self):  # type: ignore
        if self.action in {"update", "partial_update"}:
            return [permissions.IsAuthenticated(), IsBookingGuestOrAdmin()]
        if self.action == "mark_paid":
            return [IsAdmin()]
        if self.action == "owner_aggregated":
            return [IsHost()]
        return super().get_permissions()

    def _data(self, booking: Booking):
        booking = Booking.objects.select_related("property", "property__owner", "user", "payment").get(pk=booking.pk)
        return BookingSerializer(booking, context=self.get_serializer_context()).data

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        booking = services.create_booking(
            request.user,
            data["property_id"],
            data["start_date"],
            data["end_date"],
            data["guests"],
            special_requests=data["special_requests"],
        )
        if booking.status == Booking.Status.CONFIRMED:
            _notify_status_change(booking)
        return success_response(
            self._data(booking),
            message="Booking created successfully",
            status_code=status.HTTP_201_CREATED,
        )

    def update(self, request, *args, **kwargs):  # type: ignore
        booking = self.get_object()
        serializer = BookingUpdateSerializer(data=request.data, partial=kwargs.get("partial", False))
        serializer.is_valid(raise_exception=True)
        booking = services.update_booking(booking, serializer.validated_data)
        return success_response(self._data(booking), message="Booking updated successfully")

    def partial_update(self, request, *args, **kwargs):  # type: ignore
        kwargs["partial"] = True
        return self.update(request, *args, **kwargs)

    def _cancel(self, request):
        booking = self.get_object()
        serializer = BookingCancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        outcome = services.cancel_booking(booking, serializer.validated_data["reason"])
        _notify_status_change(outcome.booking)
        return success_response(
            {
                "booking": self._data(outcome.booking),
                "primary": StepResultSerializer(outcome.primary).data,
                "secondary": StepResultSerializer(outcome.secondary).data,
            },
            message="Booking cancelled successfully",
        )

    def destroy(self, request, *args, **kwargs):  # type: ignore
        return self._cancel(request)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        return self._cancel(request)

    @action(detail=True, methods=["put"])
    def confirm(self, request, pk=None):  # type: ignore
        booking = self.get_object()
        if not (booking.property.owner_id == request.user.id or request.user.is_admin()):
            raise ForbiddenError("Only the property host or an admin can confirm bookings")
        serializer = BookingConfirmSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = services.confirm_booking(booking, serializer.validated_data["notes"])
        _notify_status_change(booking)
        return success_response(self._data(booking), message="Booking confirmed successfully")

    @action(detail=True, methods=["post"], url_path="mark-paid")
    def mark_paid(self, request, pk=None):  # type: ignore
        booking = self.get_object()
        serializer = BookingMarkPaidSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = services.mark_booking_paid(booking, **serializer.validated_data)
        return success_response(self._data(booking), message="Booking marked as paid")

    @action(detail=False, methods=["get"], url_path="user/list")
    def user_list(self, request):  # type: ignore
        queryset = self.filter_queryset(self.get_queryset())
        status_filter = request.query_params.get("status")
        if status_filter:
            queryset = queryset.filter(status=status_filter.upper())
        return paginate(self, queryset, BookingSerializer, message="User bookings retrieved successfully")

    @action(detail=False, methods=["get"], url_path="owner/aggregated")
    def owner_aggregated(self, request):  # type: ignore
        data = OwnerAggregatesSerializer(services.owner_aggregates(request.user)).data
        return success_response(data, message="Owner booking statistics retrieved successfully")

    @action(detail=False, methods=["get"], url_path=r"property/(?P<property_id>\d+)")
    def property_bookings(self, request, property_id=None):  # type: ignore
        property_obj = Property.objects.filter(pk=property_id).first()
        if property_obj is None:
            raise NotFoundError("Property not found")
        if not property_obj.is_managed_by(request.user):
            raise ForbiddenError("You can only view bookings of your own properties")
        queryset = (
            Booking.objects.filter(property=property_obj)
            .select_related("property", "property__owner", "user", "payment")
            .order_by("start_date")
        )
        status_filter = request.query_params.get("status")
        if status_filter:
            queryset = queryset.filter(status=status_filter.upper())
        return paginate(self, queryset, BookingSerializer, message="Property bookings retrieved successfully")
