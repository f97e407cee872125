"""Rendering bookings as iCalendar documents."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.utils import timezone  # type: ignore
from icalendar import Calendar, Event  # type: ignore

CALENDAR_CONTENT_TYPE = "text/calendar; charset=utf-8"
UID_DOMAIN = "holiday-rentals"


def _location(property_obj) -> str:
    parts = [property_obj.address, property_obj.city, property_obj.country]
    return ", ".join(part for part in parts if part)


def _calendar() -> Calendar:
    calendar = Calendar()
    calendar.add("prodid", settings.ICAL_PRODUCT_ID)
    calendar.add("version", "2.0")
    calendar.add("calscale", "GREGORIAN")
    return calendar


def _busy_event(uid: str, start, end, summary: str, description: str, location: str) -> Event:
    event = Event()
    event.add("uid", uid)
    event.add("dtstamp", timezone.now())
    event.add("dtstart", start)
    event.add("dtend", end)
    event.add("summary", summary)
    event.add("description", description)
    event.add("location", location)
    event.add("status", "CONFIRMED")
    event.add("transp", "OPAQUE")
    return event


def property_availability_calendar(property_obj, bookings) -> bytes:
    """Занятые окна объекта (PENDING + CONFIRMED) одним календарём."""

    calendar = _calendar()
    calendar.add("x-wr-calname", f"{property_obj.title} availability")
    location = _location(property_obj)
    for booking in bookings:
        calendar.add_component(
            _busy_event(
                uid=f"property-{property_obj.pk}-booking-{booking.pk}@{UID_DOMAIN}",
                start=booking.start_date,
                end=booking.end_date,
                summary=f"Unavailable - {property_obj.title}",
                description=f"Booking window blocked. Booking ID: {booking.pk}",
                location=location,
            )
        )
    return calendar.to_ical()


def booking_calendar(booking) -> bytes:
    calendar = _calendar()
    property_obj = booking.property
    calendar.add_component(
        _busy_event(
            uid=f"booking-{booking.pk}@{UID_DOMAIN}",
            start=booking.start_date,
            end=booking.end_date,
            summary=f"Stay at {property_obj.title}",
            description=f"Booking #{booking.booking_code}",
            location=_location(property_obj),
        )
    )
    return calendar.to_ical()
