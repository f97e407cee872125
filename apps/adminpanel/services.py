"""Admin-only workflows and platform-wide aggregates."""

from __future__ import annotations

import logging
from datetime import timedelta
from decimal import Decimal
from typing import Any

from django.conf import settings  # type: ignore
from django.db import connection, transaction  # type: ignore
from django.db.models import Avg, Count, Sum  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings.models import Booking
from apps.finances.models import Payment
from apps.properties.models import Property
from apps.reviews.models import Review
from apps.subscriptions.models import Subscription, SubscriptionPlan
from apps.users.models import User
from shared.domain.errors import ConflictError, DomainValidationError

logger = logging.getLogger(__name__)

ANALYTICS_PERIODS = {
    "7d": timedelta(days=7),
    "30d": timedelta(days=30),
    "90d": timedelta(days=90),
    "1y": timedelta(days=365),
}
DEFAULT_PERIOD = "30d"


@transaction.atomic
def delete_user(actor: User, user: User) -> None:
    if actor.pk == user.pk:
        raise DomainValidationError("Cannot delete your own account")
    has_listings = Property.objects.filter(owner=user, status__in=Property.LISTED_STATUSES).exists()
    has_bookings = Booking.objects.filter(user=user).active().exists()
    if has_listings or has_bookings:
        raise ConflictError("Cannot delete user with active properties or bookings")
    user_id = user.pk
    user.delete()
    logger.info("User %s deleted by admin %s", user_id, actor.pk)


def delete_plan(plan: SubscriptionPlan) -> None:
    if plan.subscriptions.filter(is_active=True).exists():
        raise ConflictError("Cannot delete plan with active subscriptions")
    if plan.subscriptions.exists():
        # история подписок ссылается на тариф (PROTECT), поэтому только архивируем
        plan.is_active = False
        plan.save(update_fields=["is_active", "updated_at"])
        logger.info("Subscription plan %s archived", plan.pk)
        return
    plan.delete()


def _sum(queryset, field: str) -> Decimal:
    return queryset.aggregate(total=Sum(field))["total"] or Decimal("0")


def platform_analytics(period: str = DEFAULT_PERIOD, *, now=None) -> dict[str, Any]:
    """Platform totals plus figures for the trailing period (7d, 30d, 90d, 1y)."""

    if period not in ANALYTICS_PERIODS:
        period = DEFAULT_PERIOD
    now = now or timezone.now()
    since = now - ANALYTICS_PERIODS[period]

    by_role = {role: 0 for role in User.Role.values}
    for row in User.objects.values("role").annotate(total=Count("id")):
        by_role[row["role"]] = row["total"]

    paid = Payment.objects.filter(status=Payment.Status.PAID)
    active_subscriptions = Subscription.objects.filter(is_active=True)
    rating = Review.objects.aggregate(avg=Avg("rating"))["avg"]

    return {
        "period": period,
        "date_range": {"start": since, "end": now},
        "users": {
            "total": User.objects.count(),
            "new": User.objects.filter(created_at__gte=since).count(),
            "by_role": by_role,
        },
        "properties": {
            "total": Property.objects.count(),
            "live": Property.objects.filter(status=Property.Status.LIVE).count(),
            "pending": Property.objects.filter(status=Property.Status.PENDING).count(),
            "new": Property.objects.filter(created_at__gte=since).count(),
        },
        "bookings": {
            "total": Booking.objects.count(),
            "confirmed": Booking.objects.filter(status=Booking.Status.CONFIRMED).count(),
            "pending": Booking.objects.filter(status=Booking.Status.PENDING).count(),
            "new": Booking.objects.filter(created_at__gte=since).count(),
        },
        "revenue": {
            "total": _sum(paid, "amount"),
            "period": _sum(paid.filter(created_at__gte=since), "amount"),
        },
        "reviews": {
            "total": Review.objects.count(),
            "average_rating": round(rating or 0, 2),
        },
        "subscriptions": {
            "active": active_subscriptions.count(),
            "revenue": _sum(active_subscriptions, "price"),
        },
    }


def system_health() -> dict[str, Any]:
    services = {"database": "connected", "object_storage": "configured"}
    healthy = True
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except Exception as exc:  # noqa: BLE001
        logger.error("Database health check failed: %s", exc, exc_info=True)
        services["database"] = "disconnected"
        healthy = False
    if not (settings.S3_BUCKET_NAME and settings.S3_ACCESS_KEY and settings.S3_SECRET_KEY):
        services["object_storage"] = "not_configured"
        healthy = False
    return {
        "status": "healthy" if healthy else "degraded",
        "timestamp": timezone.now(),
        "services": services,
    }
