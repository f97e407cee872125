"""Notifications package.

Email delivery for one-time codes and booking status changes. Booking emails
are sent from Celery tasks (see ``apps.bookings.tasks``).
"""
