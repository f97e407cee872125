"""Domain services for booking workflows.

Availability is checked and the booking is written inside one transaction
that holds a row lock on the property, so two concurrent requests for the
same dates cannot both succeed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore

from apps.finances.models import Payment
from apps.properties.models import Property
from shared.domain.errors import (
    ConflictError,
    DomainValidationError,
    InvalidStateError,
    NotFoundError,
    PolicyViolationError,
)
from shared.domain.value_objects import StayPeriod

from .models import Booking

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepResult:
    ok: bool
    skipped: bool = False
    error: str | None = None


@dataclass(frozen=True)
class CancellationOutcome:
    """Итог отмены: основной шаг (статус брони) и вторичный (возврат платежа)."""

    booking: Booking
    primary: StepResult
    secondary: StepResult = field(default_factory=lambda: StepResult(ok=True, skipped=True))


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset
    return queryset.select_for_update()


def _validate_period(start: datetime, end: datetime, now: datetime) -> StayPeriod:
    errors: dict[str, list[str]] = {}
    if start <= now:
        errors["start_date"] = ["Start date must be in the future"]
    if end <= start:
        errors["end_date"] = ["End date must be after start date"]
    if errors:
        raise DomainValidationError("Invalid booking dates", errors=errors)
    return StayPeriod(start, end)


def ensure_property_is_available(property_obj: Property, period: StayPeriod, *, exclude_booking_id=None) -> None:
    """Ensure the property is free for the given period."""

    bookings_qs = Booking.objects.filter(property=property_obj).active().overlapping(period.start, period.end)
    if exclude_booking_id is not None:
        bookings_qs = bookings_qs.exclude(pk=exclude_booking_id)
    if bookings_qs.exists():
        raise ConflictError("Property is not available for the selected dates")


@transaction.atomic
def create_booking(
    user,
    property_id: int,
    start_date: datetime,
    end_date: datetime,
    guests: int = 1,
    *,
    special_requests: str = "",
    now: datetime | None = None,
) -> Booking:
    """Проверки идут строго по порядку: объект, статус, гости, даты, пересечения."""

    property_obj = _lock_queryset_if_possible(Property.objects.filter(pk=property_id)).first()
    if property_obj is None:
        raise NotFoundError("Property not found")
    if property_obj.status != Property.Status.LIVE:
        raise InvalidStateError("Property is not available for booking")
    if guests > property_obj.max_guests:
        raise PolicyViolationError(
            f"Maximum {property_obj.max_guests} guests allowed",
            errors={"guests": [f"Must be at most {property_obj.max_guests}"]},
        )

    period = _validate_period(start_date, end_date, now or timezone.now())
    ensure_property_is_available(property_obj, period)

    booking = Booking.objects.create(
        user=user,
        property=property_obj,
        start_date=period.start,
        end_date=period.end,
        nights=period.nights,
        guests=guests,
        amount=period.price_for(property_obj.price),
        status=Booking.Status.CONFIRMED if property_obj.instant_booking else Booking.Status.PENDING,
        payment_status=Booking.PaymentStatus.PENDING,
        special_requests=special_requests or "",
        confirmed_at=timezone.now() if property_obj.instant_booking else None,
    )
    Payment.objects.create(booking=booking, amount=booking.amount, status=Payment.Status.PENDING)
    logger.info(
        "Booking %s created for property %s (%s nights, status %s)",
        booking.booking_code,
        property_obj.pk,
        booking.nights,
        booking.status,
    )
    return booking


@transaction.atomic
def update_booking(booking: Booking, data: dict[str, Any], *, now: datetime | None = None) -> Booking:
    """Изменение брони возможно только в статусе PENDING."""

    booking = _lock_queryset_if_possible(Booking.objects.filter(pk=booking.pk)).select_related("property").get()
    if booking.status != Booking.Status.PENDING:
        raise InvalidStateError("Only pending bookings can be updated")

    property_obj = _lock_queryset_if_possible(Property.objects.filter(pk=booking.property_id)).get()
    guests = data.get("guests", booking.guests)
    if guests > property_obj.max_guests:
        raise PolicyViolationError(
            f"Maximum {property_obj.max_guests} guests allowed",
            errors={"guests": [f"Must be at most {property_obj.max_guests}"]},
        )

    start = data.get("start_date", booking.start_date)
    end = data.get("end_date", booking.end_date)
    if start != booking.start_date or end != booking.end_date:
        period = _validate_period(start, end, now or timezone.now())
        ensure_property_is_available(property_obj, period, exclude_booking_id=booking.pk)
    else:
        period = booking.get_period()

    booking.start_date = period.start
    booking.end_date = period.end
    booking.nights = period.nights
    booking.amount = period.price_for(property_obj.price)
    booking.guests = guests
    if "special_requests" in data:
        booking.special_requests = data["special_requests"] or ""
    booking.save()
    Payment.objects.filter(booking=booking, status=Payment.Status.PENDING).update(amount=booking.amount)
    return booking


def _refund_payment(booking: Booking) -> StepResult:
    if booking.payment_status != Booking.PaymentStatus.PAID:
        return StepResult(ok=True, skipped=True)
    try:
        with transaction.atomic():
            payment = Payment.objects.select_for_update().filter(booking=booking).first()
            if payment is not None:
                payment.mark_refunded(amount=payment.amount)
            booking.payment_status = Booking.PaymentStatus.REFUNDED
            booking.save(update_fields=["payment_status", "updated_at"])
    except Exception as exc:  # noqa: BLE001
        logger.error("Refund for booking %s failed: %s", booking.booking_code, exc, exc_info=True)
        booking.refresh_from_db(fields=["payment_status"])
        return StepResult(ok=False, error=str(exc))
    return StepResult(ok=True)


def cancel_booking(booking: Booking, reason: str = "") -> CancellationOutcome:
    """Отмена из PENDING или CONFIRMED.

    Возврат оплаченного платежа выполняется отдельной транзакцией после
    отмены; его ошибка попадает в ``secondary``, отмена при этом остаётся.
    """

    with transaction.atomic():
        booking = _lock_queryset_if_possible(Booking.objects.filter(pk=booking.pk)).get()
        if booking.status not in Booking.ACTIVE_STATUSES:
            raise InvalidStateError(f"Cannot cancel a {booking.status.lower()} booking")
        booking.status = Booking.Status.CANCELLED
        booking.cancelled_at = timezone.now()
        booking.cancellation_reason = reason or ""
        booking.save(update_fields=["status", "cancelled_at", "cancellation_reason", "updated_at"])

    logger.info("Booking %s cancelled", booking.booking_code)
    secondary = _refund_payment(booking)
    return CancellationOutcome(booking=booking, primary=StepResult(ok=True), secondary=secondary)


def confirm_booking(booking: Booking, notes: str = "") -> Booking:
    with transaction.atomic():
        booking = _lock_queryset_if_possible(Booking.objects.filter(pk=booking.pk)).get()
        if booking.status != Booking.Status.PENDING:
            raise InvalidStateError("Only pending bookings can be confirmed")
        booking.status = Booking.Status.CONFIRMED
        booking.confirmed_at = timezone.now()
        if notes:
            booking.admin_notes = notes
        booking.save(update_fields=["status", "confirmed_at", "admin_notes", "updated_at"])
    logger.info("Booking %s confirmed", booking.booking_code)
    return booking


@transaction.atomic
def mark_booking_paid(booking: Booking, *, transaction_id: str = "", provider: str = "") -> Booking:
    """Ручная сверка оплаты администратором."""

    booking = _lock_queryset_if_possible(Booking.objects.filter(pk=booking.pk)).get()
    if booking.status == Booking.Status.CANCELLED:
        raise InvalidStateError("Cancelled bookings cannot be marked as paid")
    if booking.payment_status == Booking.PaymentStatus.PAID:
        raise InvalidStateError("Booking is already paid")

    payment, _ = Payment.objects.get_or_create(booking=booking, defaults={"amount": booking.amount})
    payment.mark_paid(transaction_id=transaction_id or None, provider=provider or None)
    booking.payment_status = Booking.PaymentStatus.PAID
    booking.save(update_fields=["payment_status", "updated_at"])
    return booking


def complete_finished_bookings(now: datetime | None = None) -> int:
    """CONFIRMED брони с end_date <= now переводятся в COMPLETED."""

    now = now or timezone.now()
    finished = Booking.objects.filter(status=Booking.Status.CONFIRMED, end_date__lte=now)
    count = 0
    for booking in finished.iterator():
        try:
            booking.status = Booking.Status.COMPLETED
            booking.save(update_fields=["status", "updated_at"])
            count += 1
        except Exception as exc:  # noqa: BLE001
            logger.error("Failed to complete booking %s: %s", booking.booking_code, exc, exc_info=True)
    if count:
        logger.info("Completed %s finished bookings", count)
    return count


def owner_aggregates(user) -> dict[str, Any]:
    """Сводка по броням объектов хоста."""

    from django.db.models import Count, Sum  # type: ignore

    queryset = Booking.objects.for_host(user)
    by_status = {row["status"]: row["total"] for row in queryset.values("status").annotate(total=Count("id"))}
    revenue = queryset.filter(payment_status=Booking.PaymentStatus.PAID).aggregate(total=Sum("amount"))["total"]
    upcoming = queryset.active().filter(start_date__gte=timezone.now()).count()
    return {
        "total_bookings": sum(by_status.values()),
        "by_status": {choice: by_status.get(choice, 0) for choice in Booking.Status.values},
        "upcoming": upcoming,
        "paid_revenue": revenue or 0,
    }
