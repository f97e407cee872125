"""Subscription plans and owner subscriptions."""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.db.models import Q  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class SubscriptionPlan(models.Model):
    """Тариф, который владелец покупает для размещения объектов."""

    name = models.CharField(max_length=100)
    type = models.CharField(max_length=50, unique=True)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    duration_days = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    max_properties = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    features = models.JSONField(default=dict, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Subscription plan")
        verbose_name_plural = _("Subscription plans")
        ordering = ["price"]

    def __str__(self) -> str:
        return f"{self.name} ({self.type})"


class Subscription(models.Model):
    """Подписка владельца. Условия тарифа копируются на момент оформления."""

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="subscriptions",
    )
    plan = models.ForeignKey(
        SubscriptionPlan,
        on_delete=models.PROTECT,
        related_name="subscriptions",
    )
    type = models.CharField(max_length=50)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    features = models.JSONField(default=dict, blank=True)
    max_properties = models.PositiveIntegerField()
    is_active = models.BooleanField(default=True)
    paid = models.BooleanField(default=False)
    expires_at = models.DateTimeField()
    cancelled_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Subscription")
        verbose_name_plural = _("Subscriptions")
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["owner"],
                condition=Q(is_active=True),
                name="unique_active_subscription_per_owner",
            ),
        ]
        indexes = [
            models.Index(fields=["is_active", "expires_at"], name="subscription_active_exp_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.owner_id}: {self.type}"

    def is_usable(self, now=None) -> bool:
        now = now or timezone.now()
        return self.is_active and self.paid and self.expires_at > now
