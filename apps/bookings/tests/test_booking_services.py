"""Booking service rules: overlap, ordering of checks, cancellation outcome."""

from __future__ import annotations

import re
from datetime import datetime, timedelta
from datetime import timezone as dt_timezone
from decimal import Decimal
from unittest import mock

from django.db import transaction
from django.test import TestCase
from django.utils import timezone

from apps.bookings import services
from apps.bookings.models import Booking
from apps.finances.models import Payment
from apps.properties.models import Property
from apps.users.models import User
from shared.domain.errors import (
    ConflictError,
    DomainValidationError,
    InvalidStateError,
    NotFoundError,
    PolicyViolationError,
)


def utc(year: int, month: int, day: int, hour: int = 0) -> datetime:
    return datetime(year, month, day, hour, tzinfo=dt_timezone.utc)


def make_property(owner, **overrides) -> Property:
    defaults = {
        "owner": owner,
        "title": "Sea view flat",
        "description": "Two rooms near the beach",
        "location": "Old town",
        "city": "Barcelona",
        "country": "Spain",
        "address": "Carrer de la Mar 1",
        "price": Decimal("50.00"),
        "max_guests": 4,
        "status": Property.Status.LIVE,
    }
    defaults.update(overrides)
    return Property.objects.create(**defaults)


class CreateBookingTests(TestCase):
    def setUp(self) -> None:
        self.owner = User.objects.create_user(
            email="owner@example.com", password="OwnerPass123", role=User.Role.OWNER
        )
        self.guest = User.objects.create_user(email="guest@example.com", password="GuestPass123")
        self.property = make_property(self.owner)
        self.now = utc(2025, 5, 1)

    def test_overlap_conflicts_and_adjacent_stay_is_accepted(self) -> None:
        Booking.objects.create(
            user=self.guest,
            property=self.property,
            start_date=utc(2025, 6, 1),
            end_date=utc(2025, 6, 5),
            nights=4,
            amount=Decimal("200.00"),
            status=Booking.Status.CONFIRMED,
        )

        with self.assertRaises(ConflictError):
            services.create_booking(
                self.guest, self.property.pk, utc(2025, 6, 4), utc(2025, 6, 8), 2, now=self.now
            )

        booking = services.create_booking(
            self.guest, self.property.pk, utc(2025, 6, 5), utc(2025, 6, 8), 2, now=self.now
        )
        self.assertEqual(booking.status, Booking.Status.PENDING)
        self.assertEqual(booking.payment_status, Booking.PaymentStatus.PENDING)
        self.assertEqual(booking.nights, 3)
        self.assertEqual(booking.amount, Decimal("150.00"))

        payment = Payment.objects.get(booking=booking)
        self.assertEqual(payment.status, Payment.Status.PENDING)
        self.assertEqual(payment.amount, Decimal("150.00"))

    def test_cancelled_booking_does_not_block_dates(self) -> None:
        Booking.objects.create(
            user=self.guest,
            property=self.property,
            start_date=utc(2025, 6, 1),
            end_date=utc(2025, 6, 5),
            status=Booking.Status.CANCELLED,
        )
        booking = services.create_booking(
            self.guest, self.property.pk, utc(2025, 6, 2), utc(2025, 6, 4), now=self.now
        )
        self.assertEqual(booking.nights, 2)

    def test_checks_run_in_order(self) -> None:
        with self.assertRaises(NotFoundError):
            services.create_booking(self.guest, 999999, utc(2025, 6, 1), utc(2025, 6, 2), now=self.now)

        pending = make_property(self.owner, title="Draft flat", status=Property.Status.PENDING)
        # state wins over broken dates and guest count
        with self.assertRaises(InvalidStateError):
            services.create_booking(self.guest, pending.pk, utc(2025, 6, 5), utc(2025, 6, 1), 10, now=self.now)

        # guests win over broken dates
        with self.assertRaises(PolicyViolationError):
            services.create_booking(
                self.guest, self.property.pk, utc(2025, 6, 5), utc(2025, 6, 1), 5, now=self.now
            )

        with self.assertRaises(DomainValidationError) as ctx:
            services.create_booking(
                self.guest, self.property.pk, utc(2025, 4, 1), utc(2025, 4, 3), now=self.now
            )
        self.assertIn("start_date", ctx.exception.errors)

        with self.assertRaises(DomainValidationError) as ctx:
            services.create_booking(
                self.guest, self.property.pk, utc(2025, 6, 5), utc(2025, 6, 5), now=self.now
            )
        self.assertIn("end_date", ctx.exception.errors)
        self.assertFalse(Booking.objects.exists())

    def test_instant_booking_is_confirmed(self) -> None:
        instant = make_property(self.owner, title="Instant flat", instant_booking=True)
        booking = services.create_booking(self.guest, instant.pk, utc(2025, 6, 1), utc(2025, 6, 3), now=self.now)
        self.assertEqual(booking.status, Booking.Status.CONFIRMED)
        self.assertIsNotNone(booking.confirmed_at)

    def test_partial_day_counts_as_a_night(self) -> None:
        booking = services.create_booking(
            self.guest, self.property.pk, utc(2025, 6, 1, 14), utc(2025, 6, 3, 2), now=self.now
        )
        self.assertEqual(booking.nights, 2)
        self.assertEqual(booking.amount, Decimal("100.00"))

    def test_booking_code_format(self) -> None:
        booking = services.create_booking(self.guest, self.property.pk, utc(2025, 6, 1), utc(2025, 6, 2), now=self.now)
        self.assertRegex(booking.booking_code, re.compile(r"^[A-Z0-9]{8}$"))


class BookingLifecycleTests(TestCase):
    def setUp(self) -> None:
        self.owner = User.objects.create_user(
            email="owner@example.com", password="OwnerPass123", role=User.Role.OWNER
        )
        self.guest = User.objects.create_user(email="guest@example.com", password="GuestPass123")
        self.property = make_property(self.owner)
        self.now = utc(2025, 5, 1)
        self.booking = services.create_booking(
            self.guest, self.property.pk, utc(2025, 6, 1), utc(2025, 6, 4), 2, now=self.now
        )

    def test_update_recomputes_and_ignores_own_dates(self) -> None:
        booking = services.update_booking(
            self.booking, {"start_date": utc(2025, 6, 2), "end_date": utc(2025, 6, 7)}, now=self.now
        )
        self.assertEqual(booking.nights, 5)
        self.assertEqual(booking.amount, Decimal("250.00"))
        self.assertEqual(Payment.objects.get(booking=booking).amount, Decimal("250.00"))

    def test_update_rejects_overlap_and_non_pending(self) -> None:
        services.create_booking(self.guest, self.property.pk, utc(2025, 6, 10), utc(2025, 6, 12), now=self.now)
        with self.assertRaises(ConflictError):
            services.update_booking(
                self.booking, {"start_date": utc(2025, 6, 3), "end_date": utc(2025, 6, 11)}, now=self.now
            )

        services.confirm_booking(self.booking)
        with self.assertRaises(InvalidStateError):
            services.update_booking(self.booking, {"guests": 1}, now=self.now)

    def test_cancel_unpaid_skips_refund(self) -> None:
        outcome = services.cancel_booking(self.booking, "Plans changed")
        self.assertTrue(outcome.primary.ok)
        self.assertTrue(outcome.secondary.skipped)
        self.assertEqual(outcome.booking.status, Booking.Status.CANCELLED)
        self.assertEqual(outcome.booking.cancellation_reason, "Plans changed")
        self.assertIsNotNone(outcome.booking.cancelled_at)

        with self.assertRaises(InvalidStateError):
            services.cancel_booking(self.booking)

    def test_cancel_paid_refunds_payment(self) -> None:
        services.mark_booking_paid(self.booking, transaction_id="tx-1", provider="manual")
        outcome = services.cancel_booking(self.booking)

        self.assertTrue(outcome.secondary.ok)
        self.assertFalse(outcome.secondary.skipped)
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.payment_status, Booking.PaymentStatus.REFUNDED)
        payment = Payment.objects.get(booking=self.booking)
        self.assertEqual(payment.status, Payment.Status.REFUNDED)
        self.assertIsNotNone(payment.refunded_at)

    def test_refund_failure_keeps_cancellation(self) -> None:
        services.mark_booking_paid(self.booking)
        with mock.patch.object(Payment, "mark_refunded", side_effect=RuntimeError("gateway down")):
            outcome = services.cancel_booking(self.booking)

        self.assertTrue(outcome.primary.ok)
        self.assertFalse(outcome.secondary.ok)
        self.assertIn("gateway down", outcome.secondary.error)
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.status, Booking.Status.CANCELLED)
        self.assertEqual(self.booking.payment_status, Booking.PaymentStatus.PAID)

    def test_confirm_only_from_pending(self) -> None:
        booking = services.confirm_booking(self.booking, "Keys at reception")
        self.assertEqual(booking.status, Booking.Status.CONFIRMED)
        self.assertEqual(booking.admin_notes, "Keys at reception")
        with self.assertRaises(InvalidStateError):
            services.confirm_booking(booking)

    def test_mark_paid_refused_for_cancelled(self) -> None:
        services.cancel_booking(self.booking)
        with self.assertRaises(InvalidStateError):
            services.mark_booking_paid(self.booking)

    def test_complete_finished_bookings(self) -> None:
        services.confirm_booking(self.booking)
        pending = services.create_booking(
            self.guest, self.property.pk, utc(2025, 6, 10), utc(2025, 6, 12), now=self.now
        )

        self.assertEqual(services.complete_finished_bookings(now=utc(2025, 6, 3)), 0)
        self.assertEqual(services.complete_finished_bookings(now=utc(2025, 6, 20)), 1)

        self.booking.refresh_from_db()
        pending.refresh_from_db()
        self.assertEqual(self.booking.status, Booking.Status.COMPLETED)
        self.assertEqual(pending.status, Booking.Status.PENDING)

    def test_period_helpers(self) -> None:
        self.assertEqual(self.booking.get_period().nights, 3)
        self.assertTrue(self.booking.can_be_viewed_by(self.owner))
        stranger = User.objects.create_user(email="stranger@example.com", password="Stranger123")
        self.assertFalse(self.booking.can_be_viewed_by(stranger))
        self.assertLess(timezone.now() - self.booking.created_at, timedelta(minutes=5))

    def test_lock_helper_selects_for_update_in_atomic_block(self) -> None:
        queryset = Property.objects.filter(pk=self.property.pk)
        with transaction.atomic():
            self.assertTrue(services._lock_queryset_if_possible(queryset).query.select_for_update)
            self.assertIsNotNone(services._lock_queryset_if_possible(queryset).first())
