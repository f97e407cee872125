"""Celery tasks for the booking domain."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from . import services
from .models import Booking

logger = logging.getLogger(__name__)


@shared_task(name="bookings.complete_finished_bookings")
def complete_finished_bookings() -> dict[str, int]:
    """
    Автоматическое завершение броней после выезда.

    CONFIRMED брони, у которых end_date уже наступил, переводятся
    в статус COMPLETED.

    Запускается каждый час через Celery Beat.

    Returns:
        dict: {"completed": количество завершенных броней}
    """
    return {"completed": services.complete_finished_bookings()}


@shared_task(name="bookings.notify_booking_status")
def notify_booking_status(booking_id: int) -> bool:
    """Письмо гостю о подтверждении или отмене бронирования."""
    try:
        booking = Booking.objects.select_related("user", "property").get(id=booking_id)
    except Booking.DoesNotExist:
        logger.error("Booking %s not found for status notification", booking_id)
        return False

    from apps.notifications.services import send_booking_cancelled_email, send_booking_confirmation_email

    if booking.status == Booking.Status.CONFIRMED:
        return send_booking_confirmation_email(booking)
    if booking.status == Booking.Status.CANCELLED:
        return send_booking_cancelled_email(booking)
    return False
