"""Celery tasks for subscriptions."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from .services import check_expired_subscriptions as deactivate_expired

logger = logging.getLogger(__name__)


@shared_task(name="subscriptions.check_expired_subscriptions")
def check_expired_subscriptions() -> dict[str, int]:
    count = deactivate_expired()
    logger.debug("Expired subscription sweep finished: %s deactivated", count)
    return {"deactivated": count}
