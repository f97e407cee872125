"""Slug generation for models with a unique ``slug`` field."""

from __future__ import annotations

from django.utils.text import slugify  # type: ignore


def unique_slug(instance, value: str, *, field: str = "slug", max_length: int = 200) -> str:
    """Slugify ``value`` and append ``-2``, ``-3`` ... until no other row uses it."""

    base_slug = slugify(value)[:max_length] or instance.__class__.__name__.lower()
    candidate = base_slug
    counter = 1
    queryset = instance.__class__._default_manager.all()
    while queryset.filter(**{field: candidate}).exclude(pk=instance.pk).exists():
        counter += 1
        candidate = f"{base_slug}-{counter}"
    return candidate
