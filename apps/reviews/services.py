"""Review workflows: one review per guest and property, rating aggregates."""

from __future__ import annotations

import logging
from typing import Any

from django.db import transaction  # type: ignore
from django.db.models import Avg, Count  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings.models import Booking
from apps.properties.models import Property
from apps.properties.services import recalculate_rating
from shared.domain.errors import ConflictError, InvalidStateError, NotFoundError

from .models import Review

logger = logging.getLogger(__name__)


def _completed_booking(user, property_obj: Property, booking_id: int | None) -> Booking | None:
    if not booking_id:
        return None
    return Booking.objects.filter(
        pk=booking_id,
        user=user,
        property=property_obj,
        status=Booking.Status.COMPLETED,
    ).first()


@transaction.atomic
def create_review(user, property_id: int, *, rating: int, comment: str, booking_id: int | None = None) -> Review:
    property_obj = Property.objects.filter(pk=property_id).first()
    if property_obj is None:
        raise NotFoundError("Property not found")
    if property_obj.status != Property.Status.LIVE:
        raise InvalidStateError("Cannot review non-live properties")
    if Review.objects.filter(user=user, property=property_obj).exists():
        raise ConflictError("You have already reviewed this property")

    booking = _completed_booking(user, property_obj, booking_id)
    review = Review.objects.create(
        user=user,
        property=property_obj,
        booking=booking,
        rating=rating,
        comment=comment,
        is_verified=booking is not None,
    )
    recalculate_rating(property_obj)
    logger.info("Review %s added for property %s by user %s", review.pk, property_obj.pk, user.pk)
    return review


@transaction.atomic
def update_review(review: Review, data: dict[str, Any]) -> Review:
    for field in ("rating", "comment"):
        if field in data:
            setattr(review, field, data[field])
    review.save()
    recalculate_rating(review.property)
    return review


@transaction.atomic
def delete_review(review: Review) -> None:
    property_obj = review.property
    review.delete()
    recalculate_rating(property_obj)


def respond_as_admin(review: Review, response: str) -> Review:
    review.admin_response = response.strip()
    review.admin_response_at = timezone.now()
    review.save(update_fields=["admin_response", "admin_response_at", "updated_at"])
    return review


def property_summary(property_obj: Property) -> dict[str, Any]:
    """Сводка по отзывам: количество, средняя оценка и распределение 1..5."""

    reviews = Review.objects.filter(property=property_obj)
    stats = reviews.aggregate(avg=Avg("rating"), total=Count("id"))
    distribution = {str(value): 0 for value in range(1, 6)}
    for row in reviews.values("rating").annotate(total=Count("id")):
        distribution[str(row["rating"])] = row["total"]
    return {
        "total_reviews": stats["total"],
        "average_rating": round(stats["avg"] or 0, 1),
        "rating_distribution": distribution,
    }
