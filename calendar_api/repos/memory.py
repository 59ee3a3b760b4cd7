"""In-memory repository for calendar events."""

from __future__ import annotations

import datetime as dt
import threading

from calendar_api.domain.errors import InvalidInputError
from calendar_api.domain.models import Event
from calendar_api.services.conflicts import find_conflicts, has_overlap


class EventRepository:
    """Dict-backed store for Event instances, keyed by integer id.

    A single lock guards both the id counter and the dict, so every public
    operation is atomic on its own. Sequences of operations are not: a caller
    that checks ``overlaps()`` and then calls ``insert()`` can race with
    another caller doing the same.
    """

    def __init__(self, start_id: int = 1) -> None:
        if start_id < 1:
            raise ValueError(f"start_id must be a positive integer, got {start_id}")
        self._store: dict[int, Event] = {}
        self._next_id = start_id
        self._lock = threading.Lock()

    def insert(self, event: Event) -> int:
        """Store *event* under the next id and return that id."""
        if event is None:
            raise InvalidInputError("Event cannot be null")
        with self._lock:
            event_id = self._next_id
            self._next_id += 1
            self._store[event_id] = event.model_copy(update={"id": event_id})
        return event_id

    def get(self, event_id: int) -> Event | None:
        with self._lock:
            return self._store.get(event_id)

    def list_all(self) -> list[Event]:
        """Return all events ordered by date, then time of day."""
        with self._lock:
            events = list(self._store.values())
        return sorted(events, key=lambda e: (e.date, e.time))

    def list_on(self, on: dt.date) -> list[Event]:
        with self._lock:
            return [e for e in self._store.values() if e.date == on]

    def update(self, event_id: int, event: Event) -> bool:
        """Replace every field of the stored event except its id."""
        if event is None:
            raise InvalidInputError("Updated event cannot be null")
        with self._lock:
            if event_id not in self._store:
                return False
            self._store[event_id] = event.model_copy(update={"id": event_id})
        return True

    def delete(self, event_id: int) -> bool:
        with self._lock:
            return self._store.pop(event_id, None) is not None

    def count(self) -> int:
        with self._lock:
            return len(self._store)

    def conflicts(self, candidate: Event, exclude_id: int | None = None) -> list[Event]:
        """Return the stored events on the candidate's date that overlap it."""
        return find_conflicts(candidate, self.list_on(candidate.date), exclude_id)

    def overlaps(self, candidate: Event, exclude_id: int | None = None) -> bool:
        """Return whether *candidate* overlaps a stored event on the same date."""
        return has_overlap(candidate, self.list_on(candidate.date), exclude_id)

    def clear(self) -> None:
        """Drop every event. The id counter keeps counting."""
        with self._lock:
            self._store.clear()
