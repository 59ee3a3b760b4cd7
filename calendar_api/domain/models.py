"""Domain models for the calendar events service."""

from __future__ import annotations

import datetime as dt
from typing import Any

from dateutil import parser as date_parser
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_DURATION_MINUTES = 60

# dateutil fills missing fields from ``default``; a string that gives a full
# date parses the same against both.
_PARSE_DEFAULTS = (dt.datetime(2000, 1, 1), dt.datetime(2001, 2, 2))


def parse_date(value: str) -> dt.date:
    """Parse a date string, rejecting strings that omit the year, month or day.

    Raises ``ValueError`` when the string is not a complete date.
    """
    try:
        first, second = (date_parser.parse(value, default=d).date() for d in _PARSE_DEFAULTS)
    except (ValueError, OverflowError) as exc:
        raise ValueError("Invalid date format") from exc
    if first != second:
        raise ValueError("Invalid date format")
    return first


def _date_only(value: object) -> object:
    """Drop the time-of-day component of datetimes and date-like strings."""
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, str):
        try:
            return parse_date(value)
        except ValueError:
            # Let pydantic report the invalid value.
            return value
    return value


# ---------------------------------------------------------------------------
# Core domain model
# ---------------------------------------------------------------------------


class Event(BaseModel):
    """A calendar event.

    Instances are immutable: the repository stores a copy carrying its
    assigned id, and updates replace the stored instance wholesale.
    """

    model_config = ConfigDict(frozen=True)

    id: int = 0
    title: str
    date: dt.date
    time: str = ""
    description: str = ""
    duration: int = DEFAULT_DURATION_MINUTES

    @field_validator("date", mode="before")
    @classmethod
    def _truncate_date(cls, value: object) -> object:
        return _date_only(value)


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class EventRequest(BaseModel):
    """Body of create and update requests."""

    title: str = Field(max_length=100)
    date: str
    time: str = Field(max_length=10)
    description: str | None = Field(default="", max_length=500)
    duration: int = DEFAULT_DURATION_MINUTES

    @field_validator("title")
    @classmethod
    def _title_required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Title is required")
        return value

    @field_validator("time")
    @classmethod
    def _time_required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Time is required")
        return value

    @field_validator("date")
    @classmethod
    def _date_parses(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Date is required")
        parse_date(value)
        return value

    def to_event(self, event_id: int = 0) -> Event:
        return Event(
            id=event_id,
            title=self.title,
            date=self.date,
            time=self.time,
            description=self.description or "",
            duration=self.duration,
        )


class BulkCreateRequest(BaseModel):
    """Items are validated one by one so a bad item fails alone."""

    events: list[dict[str, Any]] = Field(default_factory=list)


class BulkItemResult(BaseModel):
    index: int
    success: bool
    event_id: int | None = None
    error: str | None = None


class BulkCreateResponse(BaseModel):
    total_requested: int
    success_count: int
    failure_count: int
    results: list[BulkItemResult] = Field(default_factory=list)


class SearchCriteria(BaseModel):
    """Filters accepted by the search endpoint."""

    query: str | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    time_of_day: str | None = None
    min_duration: int | None = None
    max_duration: int | None = None
    sort_by: str = "date"
    sort_descending: bool = False


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    timestamp: dt.datetime
    events: int
