"""Models for the review domain.

Defines the ``Review`` entity: a rating from 1 to 5 with a short comment
left by a guest for a property. A review linked to a completed booking of
the same guest is marked as verified.
"""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

COMMENT_MIN_LENGTH = 10
COMMENT_MAX_LENGTH = 500


class Review(models.Model):
    """Represents a review left by a guest for a property."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="reviews",
    )
    property = models.ForeignKey(
        "properties.Property",
        on_delete=models.CASCADE,
        related_name="reviews",
    )
    booking = models.ForeignKey(
        "bookings.Booking",
        on_delete=models.SET_NULL,
        related_name="reviews",
        null=True,
        blank=True,
        help_text=_("Бронирование, к которому относится отзыв"),
    )
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)],
        help_text=_("Оценка от 1 до 5"),
    )
    comment = models.CharField(max_length=COMMENT_MAX_LENGTH)
    is_verified = models.BooleanField(
        default=False,
        help_text=_("Отзыв подтверждён завершённым бронированием"),
    )

    # Ответ администрации
    admin_response = models.TextField(blank=True)
    admin_response_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Review")
        verbose_name_plural = _("Reviews")
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["user", "property"], name="unique_review_per_user_property"),
        ]
        indexes = [
            models.Index(fields=["property", "-created_at"], name="review_property_created_idx"),
            models.Index(fields=["rating"], name="review_rating_idx"),
        ]

    def __str__(self) -> str:
        return f"Review by {self.user_id} for property {self.property_id} (Rating: {self.rating})"

    def can_be_managed_by(self, user) -> bool:
        if not user or not user.is_authenticated:
            return False
        return self.user_id == user.id or user.is_admin()
