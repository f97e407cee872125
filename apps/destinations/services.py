"""Catalogue rules for regions and destinations."""

from __future__ import annotations

import logging

from django.db import transaction  # type: ignore

from shared.domain.errors import ConflictError

from .models import Destination, Region

logger = logging.getLogger(__name__)


@transaction.atomic
def delete_region(region: Region) -> None:
    """Регион удаляется только если в нём и его потомках нет направлений."""

    subtree = region.get_descendants(include_self=True)
    if Destination.objects.filter(region__in=subtree).exists():
        raise ConflictError("Cannot delete region with existing destinations")
    logger.info("Deleting region %s with %s descendants", region.pk, subtree.count() - 1)
    region.delete()
