"""Service for filtering and sorting events for the list and search routes."""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable
from operator import attrgetter

from calendar_api.domain.models import Event, SearchCriteria

# Hour ranges are [start, end).
TIME_OF_DAY_BUCKETS = {
    "morning": (6, 12),
    "afternoon": (12, 18),
    "evening": (18, 24),
}


def filter_by_date(events: Iterable[Event], on: dt.date) -> list[Event]:
    return [e for e in events if e.date == on]


def _hour_of(time: str) -> int | None:
    if not time:
        return None
    parts = time.split(":")
    if len(parts) < 2:
        return None
    try:
        return int(parts[0])
    except ValueError:
        return None


def _in_bucket(event: Event, bucket: tuple[int, int]) -> bool:
    hour = _hour_of(event.time)
    if hour is None:
        return False
    start, end = bucket
    return start <= hour < end


def _matches_text(event: Event, query: str) -> bool:
    needle = query.lower()
    return needle in event.title.lower() or needle in (event.description or "").lower()


def search_events(events: Iterable[Event], criteria: SearchCriteria) -> list[Event]:
    """Apply every filter set on *criteria*, then sort.

    Unknown ``time_of_day`` and ``sort_by`` values are ignored, falling back
    to no bucket filter and date order respectively.
    """
    results = list(events)

    if criteria.query and criteria.query.strip():
        results = [e for e in results if _matches_text(e, criteria.query)]

    if criteria.start_date is not None:
        results = [e for e in results if e.date >= criteria.start_date]
    if criteria.end_date is not None:
        results = [e for e in results if e.date <= criteria.end_date]

    if criteria.time_of_day and criteria.time_of_day.strip():
        bucket = TIME_OF_DAY_BUCKETS.get(criteria.time_of_day.strip().lower())
        if bucket is not None:
            results = [e for e in results if _in_bucket(e, bucket)]

    if criteria.min_duration is not None:
        results = [e for e in results if e.duration >= criteria.min_duration]
    if criteria.max_duration is not None:
        results = [e for e in results if e.duration <= criteria.max_duration]

    return sort_events(results, criteria.sort_by, criteria.sort_descending)


def _date_key(event: Event) -> tuple[dt.date, str]:
    return event.date, event.time


_SORT_KEYS = {
    "date": _date_key,
    "title": attrgetter("title"),
    "duration": attrgetter("duration"),
}


def sort_events(events: list[Event], sort_by: str | None, descending: bool = False) -> list[Event]:
    key = _SORT_KEYS.get((sort_by or "date").lower(), _date_key)
    return sorted(events, key=key, reverse=descending)
