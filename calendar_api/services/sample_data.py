"""Sample calendar data used to seed the store at startup."""

from __future__ import annotations

from datetime import date

from calendar_api.domain.models import Event
from calendar_api.repos.memory import EventRepository

# (title, date, time, description)
_SAMPLE_EVENTS: list[tuple[str, date, str, str]] = [
    ("New Year's Day", date(2025, 1, 1), "09:00", "Start the year with a morning walk in Hyde Park"),
    ("Team planning meeting", date(2025, 1, 6), "10:00", "Q1 goals and strategy planning"),
    ("Coffee with Sarah", date(2025, 1, 8), "13:30", "Catch up at Costa in Central London"),
    ("Gym session", date(2025, 1, 10), "18:00", "Upper body workout"),
    ("Dentist appointment", date(2025, 1, 15), "09:30", "Regular checkup at Bright Smiles Dental"),
    ("Book club meeting", date(2025, 1, 18), "19:00", "Discussing 'The Midnight Library' at Jen's house"),
    ("MOT for car", date(2025, 1, 22), "11:00", "At Kwik Fit on Oxford Road"),
    ("Cinema night", date(2025, 1, 25), "20:15", "Watching the new Marvel film at Odeon"),
    ("Online course", date(2025, 1, 28), "18:30", "JavaScript advanced techniques module"),
    ("Monthly review", date(2025, 2, 1), "14:00", "Review of January performance metrics"),
    ("Mum's birthday", date(2025, 2, 3), "18:30", "Dinner at The Ivy - remember to bring present!"),
    ("Gym session", date(2025, 2, 5), "07:30", "Leg day"),
    ("Team workshop", date(2025, 2, 7), "10:00", "New product feature brainstorming"),
    ("Doctor appointment", date(2025, 2, 10), "16:15", "Annual check-up at GP surgery"),
    ("Valentine's dinner", date(2025, 2, 14), "19:30", "Dinner reservation at Gordon Ramsay's"),
    ("Weekly shopping", date(2025, 2, 15), "10:00", "Sainsbury's run for groceries"),
    ("Meeting with financial advisor", date(2025, 2, 18), "14:30", "Discuss investment strategy for the year"),
    ("Gym session", date(2025, 2, 20), "18:00", "Upper body and cardio"),
    ("Weekend getaway", date(2025, 2, 22), "09:00", "Trip to the Lake District - check out by 11am"),
    ("Car service", date(2025, 2, 26), "08:30", "Regular service at dealership"),
    ("Online coding bootcamp", date(2025, 2, 28), "18:00", "Final project presentation"),
    ("Monthly review", date(2025, 3, 1), "14:00", "Review of February metrics and targets"),
    ("Team lunch", date(2025, 3, 3), "12:30", "Welcoming new team members at Pizza Express"),
    ("Gym session", date(2025, 3, 5), "07:30", "Full body workout"),
    ("Charity run", date(2025, 3, 8), "09:00", "10K run for Cancer Research UK"),
    ("Project deadline", date(2025, 3, 10), "17:00", "Final submission for client website"),
    ("Theatre tickets", date(2025, 3, 12), "19:30", "Hamilton at Victoria Palace Theatre"),
    ("House viewing", date(2025, 3, 15), "11:00", "Property viewing in Richmond area"),
    ("Mother's Day lunch", date(2025, 3, 16), "13:00", "Lunch at The Shard restaurant"),
    ("Team meeting", date(2025, 3, 19), "10:00", "Sprint planning and task assignment"),
    ("Dentist appointment", date(2025, 3, 19), "14:30", "Regular checkup and cleaning"),
    ("Gym session", date(2025, 3, 19), "18:00", "Lower body focus"),
    ("Dinner with friends", date(2025, 3, 19), "20:00", "Catching up at Nando's"),
]


def sample_events() -> list[Event]:
    return [
        Event(title=title, date=on, time=time, description=description)
        for title, on, time, description in _SAMPLE_EVENTS
    ]


def seed_events(repo: EventRepository) -> list[int]:
    """Insert the sample events that do not overlap anything already stored.

    Returns the ids assigned to the inserted events.
    """
    inserted: list[int] = []
    for event in sample_events():
        if repo.overlaps(event):
            continue
        inserted.append(repo.insert(event))
    return inserted
