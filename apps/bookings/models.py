"""Booking domain models for Holiday Rentals."""

from __future__ import annotations

import secrets
import string
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.value_objects import StayPeriod

BOOKING_CODE_ALPHABET = string.ascii_uppercase + string.digits
BOOKING_CODE_LENGTH = 8


class BookingQuerySet(models.QuerySet):
    def active(self):
        """Бронирования, которые занимают даты (PENDING и CONFIRMED)."""
        return self.filter(status__in=Booking.ACTIVE_STATUSES)

    def overlapping(self, start, end):
        # [a, b) и [c, d) пересекаются, если a < d и c < b
        return self.filter(start_date__lt=end, end_date__gt=start)

    def for_host(self, user):
        return self.filter(property__owner=user)


class Booking(models.Model):
    """Бронирование объекта на период [start_date, end_date)."""

    class Status(models.TextChoices):
        PENDING = "PENDING", _("Pending confirmation")
        CONFIRMED = "CONFIRMED", _("Confirmed")
        CANCELLED = "CANCELLED", _("Cancelled")
        COMPLETED = "COMPLETED", _("Completed")

    class PaymentStatus(models.TextChoices):
        PENDING = "PENDING", _("Awaiting payment")
        PAID = "PAID", _("Paid")
        FAILED = "FAILED", _("Failed")
        REFUNDED = "REFUNDED", _("Refunded")
        CANCELLED = "CANCELLED", _("Cancelled")

    ACTIVE_STATUSES = (Status.PENDING, Status.CONFIRMED)
    TERMINAL_STATUSES = (Status.CANCELLED, Status.COMPLETED)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    property = models.ForeignKey(
        "properties.Property",
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    booking_code = models.CharField(max_length=BOOKING_CODE_LENGTH, unique=True, editable=False)
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    nights = models.PositiveIntegerField(default=1)
    guests = models.PositiveSmallIntegerField(default=1, validators=[MinValueValidator(1)])
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text=_("Price per night at booking time multiplied by nights."),
    )
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    special_requests = models.TextField(blank=True)
    cancellation_reason = models.CharField(max_length=500, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    confirmed_at = models.DateTimeField(null=True, blank=True)
    admin_notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BookingQuerySet.as_manager()

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gt=models.F("start_date")),
                name="booking_valid_dates",
            ),
        ]
        indexes = [
            models.Index(fields=["property", "start_date", "end_date"], name="booking_property_dates_idx"),
            models.Index(fields=["status"], name="booking_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking #{self.booking_code} for {self.property_id}"

    def get_period(self) -> StayPeriod:
        return StayPeriod(self.start_date, self.end_date)

    def can_be_viewed_by(self, user) -> bool:
        if not user or not user.is_authenticated:
            return False
        return self.user_id == user.id or self.property.owner_id == user.id or user.is_admin()

    def save(self, *args, **kwargs):  # type: ignore
        if self._state.adding and not self.booking_code:
            self.booking_code = generate_booking_code()
        super().save(*args, **kwargs)


def generate_booking_code() -> str:
    """8 символов A-Z0-9, уникальных среди существующих бронирований."""

    while True:
        code = "".join(secrets.choice(BOOKING_CODE_ALPHABET) for _ in range(BOOKING_CODE_LENGTH))
        if not Booking.objects.filter(booking_code=code).exists():
            return code

