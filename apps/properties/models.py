"""Property domain models for Holiday Rentals.

Объект проходит модерацию: PENDING -> LIVE / REJECTED / SUSPENDED.
Бронирования и отзывы принимаются только для LIVE объектов.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.infrastructure.slugs import unique_slug


class Amenity(models.Model):
    """Удобство, которое может быть привязано к объекту."""

    name = models.CharField(max_length=100, unique=True)
    slug = models.SlugField(max_length=100, unique=True, blank=True)
    icon = models.CharField(
        max_length=100,
        blank=True,
        help_text=_("Icon identifier used by the frontend."),
    )

    class Meta:
        verbose_name = _("Amenity")
        verbose_name_plural = _("Amenities")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name

    def save(self, *args, **kwargs):  # type: ignore
        if not self.slug:
            self.slug = unique_slug(self, self.name, max_length=90)
        super().save(*args, **kwargs)


class PropertyQuerySet(models.QuerySet):
    def live(self):
        return self.filter(status=Property.Status.LIVE)

    def listed(self):
        """Объекты, занимающие слот тарифа (на модерации или опубликованные)."""
        return self.filter(status__in=Property.LISTED_STATUSES)

    def managed_by(self, user):
        return self.filter(owner=user)


class Property(models.Model):
    """Объект, выставленный на посуточную аренду."""

    class Status(models.TextChoices):
        PENDING = "PENDING", _("Pending review")
        LIVE = "LIVE", _("Live")
        REJECTED = "REJECTED", _("Rejected")
        SUSPENDED = "SUSPENDED", _("Suspended")

    class PropertyType(models.TextChoices):
        APARTMENT = "apartment", _("Apartment")
        HOUSE = "house", _("House")
        VILLA = "villa", _("Villa")
        CABIN = "cabin", _("Cabin")
        CONDO = "condo", _("Condo")
        LOFT = "loft", _("Loft")
        STUDIO = "studio", _("Studio")
        OTHER = "other", _("Other")

    LISTED_STATUSES = (Status.PENDING, Status.LIVE)
    MODERATION_STATUSES = (Status.LIVE, Status.REJECTED, Status.SUSPENDED)

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="properties",
        help_text=_("Owner or agent who manages the listing."),
    )
    title = models.CharField(max_length=100)
    slug = models.SlugField(max_length=255, unique=True, blank=True)
    description = models.TextField()
    location = models.CharField(max_length=200)
    city = models.CharField(max_length=100, db_index=True)
    country = models.CharField(max_length=100)
    address = models.CharField(max_length=500)
    latitude = models.DecimalField(
        max_digits=9,
        decimal_places=6,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("-90")), MaxValueValidator(Decimal("90"))],
    )
    longitude = models.DecimalField(
        max_digits=9,
        decimal_places=6,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("-180")), MaxValueValidator(Decimal("180"))],
    )
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    price_per_night = models.BooleanField(default=True)
    amenities = models.ManyToManyField(Amenity, blank=True, related_name="properties")
    max_guests = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(20)])
    bedrooms = models.PositiveSmallIntegerField(default=1, validators=[MinValueValidator(1), MaxValueValidator(20)])
    bathrooms = models.PositiveSmallIntegerField(default=1, validators=[MinValueValidator(1), MaxValueValidator(20)])
    property_type = models.CharField(max_length=20, choices=PropertyType.choices, default=PropertyType.APARTMENT)
    instant_booking = models.BooleanField(default=False)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    admin_notes = models.TextField(blank=True)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="moderated_properties",
    )
    region = models.ForeignKey(
        "destinations.Region",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="properties",
    )
    destination = models.ForeignKey(
        "destinations.Destination",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="properties",
    )
    ical_urls = models.JSONField(
        default=list,
        blank=True,
        help_text=_("External calendar feeds (Airbnb, Booking.com ...) registered for sync."),
    )
    is_featured = models.BooleanField(default=False)
    average_rating = models.DecimalField(max_digits=3, decimal_places=2, default=Decimal("0.00"))
    review_count = models.PositiveIntegerField(default=0)
    published_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PropertyQuerySet.as_manager()

    class Meta:
        verbose_name = _("Property")
        verbose_name_plural = _("Properties")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="property_status_idx"),
            models.Index(fields=["owner", "status"], name="property_owner_status_idx"),
        ]

    def __str__(self) -> str:
        return self.title

    @property
    def is_live(self) -> bool:
        return self.status == self.Status.LIVE

    def is_managed_by(self, user) -> bool:
        if not user or not user.is_authenticated:
            return False
        return self.owner_id == user.id or user.is_admin()

    def publish(self) -> None:
        self.status = self.Status.LIVE
        if self.published_at is None:
            self.published_at = timezone.now()

    def save(self, *args, **kwargs):  # type: ignore
        if not self.slug:
            self.slug = unique_slug(self, self.title)
        super().save(*args, **kwargs)


class PropertyMedia(models.Model):
    """Фото и видео объекта, хранятся в объектном хранилище."""

    class MediaType(models.TextChoices):
        IMAGE = "image", _("Image")
        VIDEO = "video", _("Video")

    property = models.ForeignKey(Property, on_delete=models.CASCADE, related_name="media")
    media_type = models.CharField(max_length=10, choices=MediaType.choices, default=MediaType.IMAGE)
    url = models.URLField(max_length=1000)
    key = models.CharField(max_length=500, blank=True, help_text=_("Object storage key, if uploaded here."))
    caption = models.CharField(max_length=255, blank=True)
    is_primary = models.BooleanField(default=False)
    order = models.PositiveIntegerField(default=0)
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Property media")
        verbose_name_plural = _("Property media")
        ordering = ["order", "id"]
        constraints = [
            models.UniqueConstraint(fields=["property", "url"], name="unique_property_media_url"),
        ]

    def __str__(self) -> str:
        return f"{self.media_type} for {self.property_id}"
