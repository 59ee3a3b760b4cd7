"""Service for detecting scheduling conflicts between events."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta

from calendar_api.domain.models import DEFAULT_DURATION_MINUTES, Event


def parse_time(value: str | None) -> timedelta | None:
    """Parse an ``"HH:MM"`` string into an offset from midnight.

    Only the shape is checked: ``"25:00"`` parses to 25 hours. Anything after
    the second ``:`` is ignored. Returns ``None`` when parsing fails.
    """
    if not value:
        return None
    parts = value.split(":")
    if len(parts) < 2:
        return None
    try:
        return timedelta(hours=int(parts[0]), minutes=int(parts[1]))
    except (ValueError, OverflowError):
        return None


def effective_duration(minutes: int) -> int:
    """Non-positive durations fall back to the default of one hour."""
    return minutes if minutes > 0 else DEFAULT_DURATION_MINUTES


def event_window(event: Event) -> tuple[datetime, datetime] | None:
    """Return the ``[start, end)`` interval of *event*, or ``None`` if its time is unparseable."""
    offset = parse_time(event.time)
    if offset is None:
        return None
    try:
        start = datetime.combine(event.date, datetime.min.time()) + offset
        return start, start + timedelta(minutes=effective_duration(event.duration))
    except OverflowError:
        return None


def find_conflicts(
    candidate: Event,
    existing_events: Iterable[Event],
    exclude_id: int | None = None,
) -> list[Event]:
    """Return existing events on the candidate's date that overlap it.

    Overlap rule: conflict if other.start < candidate.end AND other.end > candidate.start.
    Exact boundary touches (end == start) are NOT considered conflicts.
    A candidate whose time cannot be parsed conflicts with nothing, and stored
    events with unparseable times never take part in a conflict.
    """
    window = event_window(candidate)
    if window is None:
        return []
    start, end = window

    conflicts: list[Event] = []
    for event in existing_events:
        if exclude_id is not None and event.id == exclude_id:
            continue
        if event.date != candidate.date:
            continue
        other = event_window(event)
        if other is None:
            continue
        other_start, other_end = other
        if other_start < end and other_end > start:
            conflicts.append(event)
    return conflicts


def has_overlap(
    candidate: Event,
    existing_events: Iterable[Event],
    exclude_id: int | None = None,
) -> bool:
    """Return whether *candidate* overlaps any of *existing_events*. Never raises."""
    return bool(find_conflicts(candidate, existing_events, exclude_id))
