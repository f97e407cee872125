"""Email notifications: one-time codes and booking status changes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.conf import settings  # type: ignore
from django.core.mail import send_mail  # type: ignore
from django.utils.html import strip_tags  # type: ignore

if TYPE_CHECKING:  # pragma: no cover
    from apps.bookings.models import Booking

logger = logging.getLogger(__name__)

OTP_SUBJECTS = {
    "signup": "Verification",
    "login": "Login",
    "reset": "Password reset",
}


# ============================================================================
# EMAIL NOTIFICATIONS
# ============================================================================

def send_email_notification(
    recipient_email: str,
    subject: str,
    message: str,
    *,
    html_message: str | None = None,
) -> bool:
    """
    Универсальная функция отправки email уведомлений.

    Args:
        recipient_email: Email получателя
        subject: Тема письма
        message: Текст письма
        html_message: HTML-версия письма (опционально)

    Returns:
        bool: True если письмо отправлено успешно
    """
    try:
        text_message = strip_tags(html_message) if html_message and not message else message
        send_mail(
            subject=subject,
            message=text_message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[recipient_email],
            html_message=html_message,
            fail_silently=False,
        )
        logger.info("Email sent successfully to %s: %s", recipient_email, subject)
        return True

    except Exception as exc:  # noqa: BLE001
        logger.error("Failed to send email to %s: %s", recipient_email, exc, exc_info=True)
        return False


def send_otp_email(recipient_email: str, code: str, purpose: str) -> bool:
    """Письмо с одноразовым кодом."""
    title = OTP_SUBJECTS.get(purpose, "Verification")
    minutes = max(settings.OTP_TTL_SECONDS // 60, 1)
    message = f"Your {title.lower()} code is {code}. It expires in {minutes} minutes."
    html_message = (
        f"<h2>{title} code</h2>"
        f"<p>Your code is:</p><p><strong>{code}</strong></p>"
        f"<p>This code expires in {minutes} minutes. "
        "If you didn't request this, you can safely ignore this email.</p>"
    )
    return send_email_notification(
        recipient_email,
        f"{title} code: {code}",
        message,
        html_message=html_message,
    )


def send_booking_confirmation_email(booking: "Booking") -> bool:
    """Отправка подтверждения бронирования гостю."""
    message = (
        f"Your booking {booking.booking_code} for {booking.property.title} "
        f"({booking.start_date:%Y-%m-%d} - {booking.end_date:%Y-%m-%d}) is confirmed."
    )
    return send_email_notification(
        booking.user.email,
        f"Booking {booking.booking_code} confirmed",
        message,
    )


def send_booking_cancelled_email(booking: "Booking") -> bool:
    """Уведомление гостя об отмене бронирования."""
    message = f"Your booking {booking.booking_code} for {booking.property.title} was cancelled."
    if booking.cancellation_reason:
        message += f" Reason: {booking.cancellation_reason}"
    return send_email_notification(
        booking.user.email,
        f"Booking {booking.booking_code} cancelled",
        message,
    )
