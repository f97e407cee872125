"""Subscription lifecycle and listing entitlement."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore

from apps.properties.models import Property
from shared.domain.errors import ConflictError, InvalidStateError, NotFoundError

from .models import Subscription, SubscriptionPlan

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListingEntitlement:
    allowed: bool
    reason: str | None = None
    remaining: int = 0
    subscription: Subscription | None = None


def _listed_property_count(owner) -> int:
    return Property.objects.filter(owner=owner).listed().count()


def get_active_plans():
    return SubscriptionPlan.objects.filter(is_active=True).order_by("price")


def get_active_subscription(owner, *, lock: bool = False) -> Subscription | None:
    queryset = Subscription.objects.select_related("plan").filter(owner=owner, is_active=True)
    if lock:
        queryset = queryset.select_for_update()
    return queryset.first()


def can_list_property(owner, *, lock: bool = False, now=None) -> ListingEntitlement:
    """Может ли владелец разместить ещё один объект.

    ``lock=True`` блокирует строку подписки до конца текущей транзакции.
    """

    now = now or timezone.now()
    subscription = get_active_subscription(owner, lock=lock)
    if subscription is None or not subscription.is_usable(now):
        return ListingEntitlement(allowed=False, reason="No active subscription")

    count = _listed_property_count(owner)
    if count >= subscription.max_properties:
        return ListingEntitlement(
            allowed=False,
            reason=f"Maximum properties ({subscription.max_properties}) reached",
            subscription=subscription,
        )
    return ListingEntitlement(
        allowed=True,
        remaining=subscription.max_properties - count,
        subscription=subscription,
    )


@transaction.atomic
def create_subscription(owner, plan_id: int, paid: bool = False, *, now=None) -> Subscription:
    plan = SubscriptionPlan.objects.filter(pk=plan_id).first()
    if plan is None:
        raise NotFoundError("Subscription plan not found")
    if not plan.is_active:
        raise InvalidStateError("Subscription plan is not active")

    if Subscription.objects.select_for_update().filter(owner=owner, is_active=True).exists():
        raise ConflictError("User already has an active subscription")

    now = now or timezone.now()
    subscription = Subscription.objects.create(
        owner=owner,
        plan=plan,
        type=plan.type,
        price=plan.price,
        features=plan.features,
        max_properties=plan.max_properties,
        is_active=True,
        paid=paid,
        expires_at=now + timedelta(days=plan.duration_days),
    )
    logger.info("Owner %s subscribed to plan %s (subscription %s)", owner.pk, plan.type, subscription.pk)
    return subscription


def get_owned_subscription(owner, subscription_id: int) -> Subscription:
    subscription = Subscription.objects.filter(pk=subscription_id, owner=owner).first()
    if subscription is None:
        raise NotFoundError("Subscription not found")
    return subscription


def cancel_subscription(subscription_id: int, *, owner=None) -> Subscription:
    """Повторная отмена просто перезаписывает те же поля."""

    queryset = Subscription.objects.all()
    if owner is not None:
        queryset = queryset.filter(owner=owner)
    subscription = queryset.filter(pk=subscription_id).first()
    if subscription is None:
        raise NotFoundError("Subscription not found")

    subscription.is_active = False
    subscription.cancelled_at = timezone.now()
    subscription.save(update_fields=["is_active", "cancelled_at", "updated_at"])
    logger.info("Subscription %s cancelled", subscription.pk)
    return subscription


@transaction.atomic
def change_subscription_plan(owner, new_plan_id: int, paid: bool = False) -> Subscription:
    """Отмена текущей подписки и оформление новой в одной транзакции."""

    plan = SubscriptionPlan.objects.filter(pk=new_plan_id).first()
    if plan is None:
        raise NotFoundError("Subscription plan not found")
    if not plan.is_active:
        raise InvalidStateError("Subscription plan is not active")

    current = get_active_subscription(owner, lock=True)
    if current is not None:
        cancel_subscription(current.pk)
    return create_subscription(owner, plan.pk, paid)


def get_user_subscription(owner) -> dict | None:
    subscription = get_active_subscription(owner)
    if subscription is None:
        return None
    count = _listed_property_count(owner)
    return {
        "subscription": subscription,
        "property_count": count,
        "remaining_properties": max(subscription.max_properties - count, 0),
    }


def get_usage(owner) -> dict:
    details = get_user_subscription(owner)
    if details is None:
        raise NotFoundError("No active subscription found")
    subscription = details["subscription"]
    return {
        **details,
        "max_properties": subscription.max_properties,
        "usage_percentage": round(details["property_count"] / subscription.max_properties * 100),
    }


def set_subscription_flags(subscription_id: int, *, paid: bool | None = None, is_active: bool | None = None) -> Subscription:
    """Ручная корректировка администратором (оплата / активность)."""

    with transaction.atomic():
        subscription = Subscription.objects.select_for_update().filter(pk=subscription_id).first()
        if subscription is None:
            raise NotFoundError("Subscription not found")
        update_fields = ["updated_at"]
        if paid is not None:
            subscription.paid = paid
            update_fields.append("paid")
        if is_active is not None:
            if is_active and not subscription.is_active:
                clash = Subscription.objects.filter(owner_id=subscription.owner_id, is_active=True)
                if clash.exclude(pk=subscription.pk).exists():
                    raise ConflictError("Owner already has another active subscription")
                subscription.cancelled_at = None
                update_fields.append("cancelled_at")
            subscription.is_active = is_active
            update_fields.append("is_active")
        subscription.save(update_fields=update_fields)
    return subscription


def check_expired_subscriptions(now=None) -> int:
    """Деактивирует все активные подписки с истёкшим сроком."""

    now = now or timezone.now()
    expired = Subscription.objects.filter(is_active=True, expires_at__lt=now)
    count = 0
    for subscription in expired.iterator():
        try:
            subscription.is_active = False
            subscription.save(update_fields=["is_active", "updated_at"])
            count += 1
        except Exception as exc:  # noqa: BLE001
            logger.error("Failed to deactivate subscription %s: %s", subscription.pk, exc, exc_info=True)
    if count:
        logger.info("Deactivated %s expired subscriptions", count)
    return count
