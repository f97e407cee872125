"""
Process-local cache of external calendar blocks.

One entry per property::

    {
        "urls": [...],                 # every feed URL ever synced
        "events": [{start, end, summary, uid}, ...],
        "fetched_at": <epoch ms>,
        "feeds": [{url, events_count, fetched_at}, ...],
    }

Entries live only in the current process and disappear on restart. They are
used for search filtering and for the blocks endpoint; booking creation never
consults them.
"""

from __future__ import annotations

import copy
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Iterable


def now_ms() -> int:
    return int(time.time() * 1000)


def epoch_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


@dataclass
class FeedData:
    """Результат загрузки одного фида."""

    url: str
    events: list[dict[str, Any]] = field(default_factory=list)
    fetched_at: int | None = None


def _normalize_events(events: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    return [
        {
            "start": event["start"],
            "end": event["end"],
            "summary": event.get("summary") or None,
            "uid": event.get("uid") or None,
        }
        for event in events
    ]


class IcalCache:
    def __init__(self, *, clock: Callable[[], int] = now_ms) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._store: dict[int, dict[str, Any]] = {}

    def set(self, property_id: int, *, urls: list[str], events: list[dict[str, Any]], fetched_at: int | None = None, feeds=None) -> None:
        entry = {
            "urls": [url for url in urls if isinstance(url, str)],
            "events": _normalize_events(events),
            "fetched_at": fetched_at or self._clock(),
            "feeds": list(feeds or []),
        }
        with self._lock:
            self._store[int(property_id)] = entry

    def upsert_merged(self, property_id: int, urls: Iterable[str], feeds: Iterable[FeedData]) -> None:
        """Объединяет URL со старыми, события берёт только из переданных фидов.

        Дубликаты по (uid, start, end) отбрасываются.
        """

        feeds = list(feeds)
        now = self._clock()
        seen: set[tuple[str, int, int]] = set()
        merged: list[dict[str, Any]] = []
        for feed in feeds:
            for event in _normalize_events(feed.events):
                key = (event["uid"] or "", epoch_ms(event["start"]), epoch_ms(event["end"]))
                if key in seen:
                    continue
                seen.add(key)
                merged.append(event)

        feed_meta = [
            {"url": feed.url, "events_count": len(feed.events), "fetched_at": feed.fetched_at or now}
            for feed in feeds
        ]
        with self._lock:
            previous = self._store.get(int(property_id))
            known = list(previous["urls"]) if previous else []
            for url in urls:
                if url not in known:
                    known.append(url)
            self._store[int(property_id)] = {
                "urls": known,
                "events": merged,
                "fetched_at": now,
                "feeds": feed_meta,
            }

    def get(self, property_id: int) -> dict[str, Any] | None:
        with self._lock:
            entry = self._store.get(int(property_id))
            return copy.deepcopy(entry) if entry is not None else None

    def get_meta(self, property_id: int) -> dict[str, Any]:
        with self._lock:
            entry = self._store.get(int(property_id))
            if entry is None:
                return {"feed_count": 0, "events": 0, "last_fetched_at": None}
            return {
                "feed_count": len(entry["urls"]),
                "events": len(entry["events"]),
                "last_fetched_at": entry["fetched_at"],
            }

    def is_fresh(self, property_id: int, max_age_ms: int) -> bool:
        with self._lock:
            entry = self._store.get(int(property_id))
        if entry is None:
            return False
        return self._clock() - entry["fetched_at"] <= max_age_ms

    def stale_entries(self, max_age_ms: int) -> list[tuple[int, list[str]]]:
        """(property_id, urls) для записей старше max_age_ms, у которых есть URL."""

        now = self._clock()
        with self._lock:
            return [
                (pid, list(entry["urls"]))
                for pid, entry in self._store.items()
                if entry["urls"] and (not entry["fetched_at"] or now - entry["fetched_at"] > max_age_ms)
            ]

    def clear(self, property_id: int | None = None) -> None:
        with self._lock:
            if property_id is None:
                self._store.clear()
            else:
                self._store.pop(int(property_id), None)

    def entries(self) -> list[dict[str, Any]]:
        with self._lock:
            return [{"property_id": pid, **copy.deepcopy(entry)} for pid, entry in self._store.items()]

    def blocks_between(self, property_id: int, start: datetime, end: datetime) -> list[dict[str, Any]]:
        entry = self.get(property_id)
        if entry is None:
            return []
        return [event for event in entry["events"] if event["start"] < end and event["end"] > start]

    def blocked_property_ids(self, start: datetime, end: datetime) -> list[int]:
        """Объекты, у которых хотя бы одно внешнее событие пересекает [start, end)."""

        with self._lock:
            snapshot = list(self._store.items())
        return [
            pid
            for pid, entry in snapshot
            if any(event["start"] < end and event["end"] > start for event in entry["events"])
        ]
