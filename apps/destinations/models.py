"""Regions (tree) and destinations used to group listings."""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore
from mptt.models import MPTTModel, TreeForeignKey  # type: ignore

from shared.infrastructure.slugs import unique_slug


class Region(MPTTModel):
    """Hierarchical region (country, state, coast ...) using MPTT."""

    name = models.CharField(_("Name"), max_length=255)
    parent = TreeForeignKey(
        "self",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="children",
        verbose_name=_("Parent region"),
    )
    slug = models.SlugField(_("Slug"), max_length=255, unique=True, blank=True)
    description = models.TextField(blank=True)
    image_url = models.URLField(max_length=500, blank=True)
    sort_order = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class MPTTMeta:
        order_insertion_by = ["sort_order", "name"]

    class Meta:
        verbose_name = _("Region")
        verbose_name_plural = _("Regions")
        ordering = ["tree_id", "lft"]
        indexes = [
            models.Index(fields=["parent", "sort_order"], name="region_parent_sort_idx"),
        ]

    def __str__(self) -> str:
        if self.parent_id:
            return f"{self.parent.name} - {self.name}"
        return self.name

    def save(self, *args, **kwargs):  # type: ignore
        if not self.slug:
            self.slug = unique_slug(self, self.name)
        super().save(*args, **kwargs)


class Destination(models.Model):
    """Направление внутри региона (город, курорт)."""

    region = models.ForeignKey(Region, on_delete=models.PROTECT, related_name="destinations")
    name = models.CharField(_("Name"), max_length=255)
    slug = models.SlugField(_("Slug"), max_length=255, unique=True, blank=True)
    description = models.TextField(blank=True)
    image_url = models.URLField(max_length=500, blank=True)
    sort_order = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Destination")
        verbose_name_plural = _("Destinations")
        ordering = ["sort_order", "name"]

    def __str__(self) -> str:
        return f"{self.name} ({self.region.name})"

    def save(self, *args, **kwargs):  # type: ignore
        if not self.slug:
            self.slug = unique_slug(self, self.name)
        super().save(*args, **kwargs)
