"""Fetching and parsing external iCal feeds (Airbnb, Booking.com, VRBO ...)."""

from __future__ import annotations

import logging
import threading
from datetime import date, datetime, time, timezone

import requests  # type: ignore
from django.conf import settings  # type: ignore
from icalendar import Calendar  # type: ignore

from shared.domain.errors import UpstreamError

from .cache import FeedData, now_ms

logger = logging.getLogger(__name__)


def _as_utc(value) -> datetime:
    # all-day events come as plain dates
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    raise ValueError(f"Unsupported date value: {value!r}")


def parse_events(payload: bytes | str) -> list[dict]:
    """VEVENT с DTSTART и DTEND; остальные компоненты игнорируются."""

    try:
        calendar = Calendar.from_ical(payload)
    except ValueError as exc:
        raise UpstreamError("Feed is not a valid iCalendar document") from exc

    events = []
    for component in calendar.walk("VEVENT"):
        dtstart = component.get("DTSTART")
        dtend = component.get("DTEND")
        if dtstart is None or dtend is None:
            continue
        uid = component.get("UID")
        summary = component.get("SUMMARY")
        events.append(
            {
                "start": _as_utc(dtstart.dt),
                "end": _as_utc(dtend.dt),
                "summary": str(summary) if summary else None,
                "uid": str(uid) if uid else None,
            }
        )
    return events


def fetch_feed(url: str, *, timeout: int | None = None, session=None) -> FeedData:
    http = session or requests
    try:
        response = http.get(url, timeout=timeout or settings.ICAL_FETCH_TIMEOUT)
        response.raise_for_status()
    except requests.exceptions.RequestException as exc:
        logger.error("iCal feed %s could not be fetched: %s", url, exc)
        raise UpstreamError(f"Failed to fetch iCal feed: {url}") from exc

    events = parse_events(response.content)
    logger.info("Fetched %s events from %s", len(events), url)
    return FeedData(url=url, events=events, fetched_at=now_ms())


def fetch_feeds(urls, *, timeout: int | None = None, session=None) -> list[FeedData]:
    return [fetch_feed(url, timeout=timeout, session=session) for url in urls]


def refresh_stale_feeds(cache, max_age_ms: int, *, timeout: int | None = None, session=None) -> list[int]:
    """Перезагружает сохранённые URL устаревших записей.

    Ошибка одного объекта логируется и не мешает остальным.
    Returns the ids of the properties that were refreshed.
    """

    refreshed = []
    for property_id, urls in cache.stale_entries(max_age_ms):
        try:
            feeds = fetch_feeds(urls, timeout=timeout, session=session)
        except UpstreamError as exc:
            logger.warning("Skipping iCal refresh for property %s: %s", property_id, exc.message)
            continue
        cache.upsert_merged(property_id, urls, feeds)
        refreshed.append(property_id)
    if refreshed:
        logger.info("Refreshed iCal feeds for %s properties", len(refreshed))
    return refreshed


class StaleFeedRefresher:
    """Runs ``refresh_stale_feeds`` in a background thread, one run at a time."""

    def __init__(self, cache, *, timeout: int | None = None, session=None) -> None:
        self.cache = cache
        self.timeout = timeout
        self.session = session
        self._running = threading.Lock()
        self._thread: threading.Thread | None = None

    def trigger(self, max_age_ms: int) -> bool:
        """Запускает обновление, если есть устаревшие записи и поток не занят."""

        if not self.cache.stale_entries(max_age_ms):
            return False
        if not self._running.acquire(blocking=False):
            return False
        thread = threading.Thread(
            target=self._run, args=(max_age_ms,), name="ical-stale-refresh", daemon=True
        )
        self._thread = thread
        try:
            thread.start()
        except RuntimeError:
            self._running.release()
            raise
        return True

    def _run(self, max_age_ms: int) -> None:
        try:
            refresh_stale_feeds(self.cache, max_age_ms, timeout=self.timeout, session=self.session)
        except Exception:  # noqa: BLE001
            logger.error("Background iCal refresh failed", exc_info=True)
        finally:
            self._running.release()

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)
