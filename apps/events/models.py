"""Editorial catalogue of local events."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Event(models.Model):
    title = models.CharField(_("Title"), max_length=200)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=100, blank=True, db_index=True)
    city = models.CharField(max_length=100, blank=True)
    country = models.CharField(max_length=100, blank=True)
    venue = models.CharField(max_length=255, blank=True)
    image_url = models.URLField(max_length=500, blank=True)
    start_datetime = models.DateTimeField(_("Starts at"))
    end_datetime = models.DateTimeField(_("Ends at"), null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_events",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Event")
        verbose_name_plural = _("Events")
        ordering = ["start_datetime", "id"]
        indexes = [
            models.Index(fields=["city", "start_datetime"], name="event_city_start_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_datetime__isnull=True)
                | models.Q(end_datetime__gte=models.F("start_datetime")),
                name="event_end_after_start",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.title} ({self.start_datetime:%Y-%m-%d})"
