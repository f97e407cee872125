"""Property lifecycle services: creation quota, moderation, media, availability."""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable

from django.db import transaction  # type: ignore
from django.db.models import Avg, Count, Q  # type: ignore

from shared.domain.errors import ConflictError, DomainValidationError, ForbiddenError

from .models import Property, PropertyMedia

logger = logging.getLogger(__name__)


def _apply_relations(property_obj: Property, amenities, media) -> None:
    if amenities is not None:
        property_obj.amenities.set(amenities)
    if media:
        add_media(property_obj, media)


@transaction.atomic
def create_property(user, data: dict[str, Any]) -> Property:
    """Создаёт объект в статусе PENDING.

    Для OWNER лимит тарифа проверяется в той же транзакции, строка подписки
    заблокирована до коммита.
    """

    from apps.subscriptions.services import can_list_property

    if user.is_owner():
        entitlement = can_list_property(user, lock=True)
        if not entitlement.allowed:
            raise ForbiddenError(entitlement.reason)

    data = dict(data)
    amenities = data.pop("amenities", None)
    media = data.pop("media", None)
    data.pop("status", None)

    property_obj = Property.objects.create(owner=user, status=Property.Status.PENDING, **data)
    _apply_relations(property_obj, amenities, media)
    logger.info("Property %s created by user %s", property_obj.pk, user.pk)
    return property_obj


def update_property(property_obj: Property, data: dict[str, Any]) -> Property:
    data = dict(data)
    amenities = data.pop("amenities", None)
    media = data.pop("media", None)
    data.pop("status", None)

    for field, value in data.items():
        setattr(property_obj, field, value)
    property_obj.save()
    _apply_relations(property_obj, amenities, media)
    return property_obj


def delete_property(property_obj: Property) -> None:
    if property_obj.bookings.active().exists():
        raise ConflictError("Cannot delete property with active bookings")
    keys = list(property_obj.media.exclude(key="").values_list("key", flat=True))
    property_obj.delete()
    _delete_stored_objects(keys)


def moderate_property(property_obj: Property, status: str, admin, notes: str | None = None) -> Property:
    """Решение модератора: LIVE, REJECTED или SUSPENDED."""

    if status not in Property.MODERATION_STATUSES:
        raise DomainValidationError(
            "Invalid status. Must be LIVE, REJECTED, or SUSPENDED",
            errors={"status": [f"Unsupported status: {status}"]},
        )
    if status == Property.Status.LIVE:
        property_obj.publish()
    else:
        property_obj.status = status
    if notes is not None:
        property_obj.admin_notes = notes
    property_obj.reviewed_by = admin
    property_obj.save(update_fields=["status", "published_at", "admin_notes", "reviewed_by", "updated_at"])
    logger.info("Property %s moderated to %s by %s", property_obj.pk, status, admin.pk)
    return property_obj


def add_media(property_obj: Property, items: Iterable[dict[str, Any]]) -> list[PropertyMedia]:
    """Добавляет медиа; URL, уже привязанные к объекту, пропускаются."""

    existing = set(property_obj.media.values_list("url", flat=True))
    next_order = property_obj.media.count()
    created = []
    for item in items:
        url = item["url"].strip()
        if url in existing:
            continue
        existing.add(url)
        if item.get("is_primary"):
            property_obj.media.update(is_primary=False)
        created.append(
            PropertyMedia.objects.create(
                property=property_obj,
                url=url,
                key=item.get("key", ""),
                media_type=item.get("media_type", PropertyMedia.MediaType.IMAGE),
                caption=item.get("caption", ""),
                is_primary=bool(item.get("is_primary")),
                order=next_order,
            )
        )
        next_order += 1
    return created


def remove_media(property_obj: Property, urls: Iterable[str]) -> int:
    targets = {str(url).strip() for url in urls}
    media = property_obj.media.filter(url__in=targets)
    keys = [item.key for item in media if item.key]
    count = media.count()
    media.delete()
    _delete_stored_objects(keys)
    return count


def _delete_stored_objects(keys: list[str]) -> None:
    if not keys:
        return
    from apps.media.apps import get_object_storage

    storage = get_object_storage()
    for key in keys:
        try:
            storage.delete(key)
        except Exception as exc:  # noqa: BLE001
            logger.error("Failed to delete stored object %s: %s", key, exc, exc_info=True)


def check_availability(property_obj: Property, start: datetime, end: datetime, ical_cache=None) -> dict[str, bool]:
    """Свободен ли объект на [start, end): брони и (если есть) внешние календари."""

    if end <= start:
        raise DomainValidationError("Invalid date range", errors={"end_date": ["Must be after start_date"]})

    booking_conflict = property_obj.bookings.active().overlapping(start, end).exists()
    ical_conflict = bool(ical_cache and ical_cache.blocks_between(property_obj.pk, start, end))
    return {
        "available": not booking_conflict and not ical_conflict,
        "booking_conflict": booking_conflict,
        "ical_conflict": ical_conflict,
    }


def popular_cities(limit: int = 10) -> list[dict[str, Any]]:
    return list(
        Property.objects.live()
        .values("city", "country")
        .annotate(property_count=Count("id"))
        .order_by("-property_count", "city")[:limit]
    )


def recalculate_rating(property_obj: Property) -> None:
    stats = property_obj.reviews.aggregate(avg=Avg("rating"), total=Count("id"))
    property_obj.average_rating = Decimal(str(round(stats["avg"] or 0, 2)))
    property_obj.review_count = stats["total"]
    property_obj.save(update_fields=["average_rating", "review_count", "updated_at"])


def visible_to(user):
    """LIVE для всех; владельцу ещё и свои объекты, администратору всё."""

    queryset = Property.objects.all()
    if user and user.is_authenticated:
        if user.is_admin():
            return queryset
        return queryset.filter(Q(status=Property.Status.LIVE) | Q(owner=user))
    return queryset.live()