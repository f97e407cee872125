import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("holiday_rentals")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Деактивация истекших подписок - каждые 15 минут
    "check-expired-subscriptions": {
        "task": "subscriptions.check_expired_subscriptions",
        "schedule": 15 * 60.0,
        "options": {"expires": 14 * 60},
    },
    # Завершение броней после выезда - каждый час
    "complete-finished-bookings": {
        "task": "bookings.complete_finished_bookings",
        "schedule": crontab(minute=15),  # каждый час в 15 минут
    },
}

app.conf.timezone = "UTC"
