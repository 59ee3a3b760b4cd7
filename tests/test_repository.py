"""Tests for the in-memory event repository."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import date

import pytest
from pydantic import ValidationError

from calendar_api.domain.errors import InvalidInputError
from calendar_api.domain.models import Event
from calendar_api.repos.memory import EventRepository


@pytest.fixture()
def repo() -> EventRepository:
    return EventRepository()


def _make_event(**overrides) -> Event:
    defaults = dict(
        title="Team meeting",
        date=date(2025, 3, 19),
        time="10:00",
        description="Sprint planning",
        duration=60,
    )
    defaults.update(overrides)
    return Event(**defaults)


# ---------------------------------------------------------------------------
# Insert / get
# ---------------------------------------------------------------------------


def test_insert_assigns_sequential_ids_from_one(repo):
    ids = [repo.insert(_make_event(time=f"{h:02d}:00")) for h in range(3)]
    assert ids == [1, 2, 3]
    assert repo.count() == 3


def test_insert_respects_start_id():
    repo = EventRepository(start_id=100)
    assert repo.insert(_make_event()) == 100
    assert repo.insert(_make_event()) == 101


@pytest.mark.parametrize("start_id", [0, -5])
def test_non_positive_start_id_is_rejected(start_id):
    with pytest.raises(ValueError):
        EventRepository(start_id=start_id)


def test_insert_none_raises(repo):
    with pytest.raises(InvalidInputError):
        repo.insert(None)
    assert repo.count() == 0


def test_insert_stores_copy_with_assigned_id(repo):
    event = _make_event()
    event_id = repo.insert(event)
    stored = repo.get(event_id)
    assert stored.id == event_id
    assert event.id == 0
    assert stored.title == event.title


def test_get_missing_returns_none(repo):
    assert repo.get(42) is None


def test_get_is_idempotent(repo):
    event_id = repo.insert(_make_event())
    assert repo.get(event_id) == repo.get(event_id)


def test_stored_events_are_immutable(repo):
    event_id = repo.insert(_make_event())
    stored = repo.get(event_id)
    with pytest.raises(ValidationError):
        stored.title = "Changed"
    assert repo.get(event_id).title == "Team meeting"


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------


def test_list_all_sorted_by_date_then_time(repo):
    repo.insert(_make_event(date=date(2025, 3, 20), time="09:00"))
    repo.insert(_make_event(date=date(2025, 3, 19), time="14:30"))
    repo.insert(_make_event(date=date(2025, 3, 19), time="08:15"))
    repo.insert(_make_event(date=date(2025, 1, 1), time="23:00"))

    keys = [(e.date, e.time) for e in repo.list_all()]
    assert keys == sorted(keys)
    assert keys[0] == (date(2025, 1, 1), "23:00")


def test_list_on_returns_only_that_day(repo):
    repo.insert(_make_event(date=date(2025, 3, 19)))
    repo.insert(_make_event(date=date(2025, 3, 20)))
    assert [e.date for e in repo.list_on(date(2025, 3, 20))] == [date(2025, 3, 20)]


# ---------------------------------------------------------------------------
# Update / delete
# ---------------------------------------------------------------------------


def test_update_replaces_fields_and_keeps_id(repo):
    event_id = repo.insert(_make_event())
    replacement = _make_event(
        id=999,
        title="Retro",
        date=date(2025, 4, 1),
        time="16:00",
        description="",
        duration=30,
    )
    assert repo.update(event_id, replacement) is True

    stored = repo.get(event_id)
    assert stored.id == event_id
    assert (stored.title, stored.date, stored.time, stored.description, stored.duration) == (
        "Retro",
        date(2025, 4, 1),
        "16:00",
        "",
        30,
    )
    assert repo.get(999) is None


def test_update_missing_returns_false(repo):
    assert repo.update(5, _make_event()) is False
    assert repo.count() == 0


def test_update_none_raises(repo):
    event_id = repo.insert(_make_event())
    with pytest.raises(InvalidInputError):
        repo.update(event_id, None)


def test_delete(repo):
    event_id = repo.insert(_make_event())
    assert repo.delete(event_id) is True
    assert repo.delete(event_id) is False
    assert repo.get(event_id) is None
    assert repo.count() == 0


def test_deleted_ids_are_never_reused(repo):
    first = repo.insert(_make_event())
    repo.delete(first)
    repo.clear()
    assert repo.insert(_make_event()) == first + 1


# ---------------------------------------------------------------------------
# Overlap queries
# ---------------------------------------------------------------------------


def test_overlaps_against_store(repo):
    repo.insert(_make_event(time="10:00", duration=60))
    assert repo.overlaps(_make_event(time="10:30")) is True
    assert repo.overlaps(_make_event(time="09:00")) is False
    assert repo.overlaps(_make_event(time="10:00", date=date(2025, 3, 20))) is False


def test_event_never_overlaps_itself_when_excluded(repo):
    event_id = repo.insert(_make_event())
    stored = repo.get(event_id)
    assert repo.overlaps(stored) is True
    assert repo.overlaps(stored, exclude_id=event_id) is False


def test_conflicts_lists_overlapping_events(repo):
    a = repo.insert(_make_event(time="10:00"))
    repo.insert(_make_event(time="12:00"))
    assert [e.id for e in repo.conflicts(_make_event(time="10:45"))] == [a]


# ---------------------------------------------------------------------------
# Concurrency
# ---------------------------------------------------------------------------


def test_concurrent_inserts_get_distinct_ids(repo):
    workers = 16
    per_worker = 250
    barrier = threading.Barrier(workers)

    def insert_many(worker: int) -> list[int]:
        barrier.wait()
        return [repo.insert(_make_event(title=f"w{worker}-{i}")) for i in range(per_worker)]

    with ThreadPoolExecutor(max_workers=workers) as pool:
        batches = list(pool.map(insert_many, range(workers)))

    ids = [event_id for batch in batches for event_id in batch]
    total = workers * per_worker
    assert len(set(ids)) == total
    assert sorted(ids) == list(range(1, total + 1))
    assert repo.count() == total
    for batch in batches:
        assert batch == sorted(batch)


def test_concurrent_reads_during_writes(repo):
    stop = threading.Event()
    errors: list[BaseException] = []

    def reader() -> None:
        try:
            while not stop.is_set():
                for event in repo.list_all():
                    assert event.id > 0
                repo.overlaps(_make_event(time="10:15"))
        except BaseException as exc:  # noqa: BLE001
            errors.append(exc)

    readers = [threading.Thread(target=reader) for _ in range(4)]
    for t in readers:
        t.start()
    for i in range(500):
        event_id = repo.insert(_make_event(title=f"e{i}"))
        if i % 3 == 0:
            repo.delete(event_id)
    stop.set()
    for t in readers:
        t.join()

    assert errors == []
