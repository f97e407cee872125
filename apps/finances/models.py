"""Financial domain models for Holiday Rentals."""

from __future__ import annotations

from decimal import Decimal

from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Payment(models.Model):
    """Платёж, связанный с бронированием (один на бронь)."""

    class Status(models.TextChoices):
        PENDING = "PENDING", _("Awaiting payment")
        PAID = "PAID", _("Paid")
        FAILED = "FAILED", _("Failed")
        REFUNDED = "REFUNDED", _("Refunded")
        CANCELLED = "CANCELLED", _("Cancelled")

    booking = models.OneToOneField(
        "bookings.Booking",
        on_delete=models.CASCADE,
        related_name="payment",
    )
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=3, default="USD")
    transaction_id = models.CharField(max_length=100, blank=True)
    provider = models.CharField(max_length=50, blank=True, help_text=_("Payment provider name"))
    metadata = models.JSONField(default=dict, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    refunded_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Payment")
        verbose_name_plural = _("Payments")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"Payment {self.booking_id} ({self.status})"

    def mark_paid(self, transaction_id: str | None = None, provider: str | None = None) -> None:
        self.status = self.Status.PAID
        if transaction_id:
            self.transaction_id = transaction_id
        if provider:
            self.provider = provider
        self.paid_at = timezone.now()
        self.save(update_fields=["status", "transaction_id", "provider", "paid_at", "updated_at"])

    def mark_refunded(self, amount: Decimal | None = None) -> None:
        self.status = self.Status.REFUNDED
        if amount is not None:
            self.metadata["refund_amount"] = str(amount)
        self.refunded_at = timezone.now()
        self.save(update_fields=["status", "metadata", "refunded_at", "updated_at"])
