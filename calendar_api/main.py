"""FastAPI application — entry point for the calendar events service."""

from __future__ import annotations

import datetime as dt
import logging
import time
import uuid
from typing import Any

from fastapi import APIRouter, Depends, FastAPI, Query, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from calendar_api.config import Settings, get_settings
from calendar_api.domain.errors import ApiError, ConflictError, InvalidInputError, NotFoundError
from calendar_api.domain.models import (
    BulkCreateRequest,
    BulkCreateResponse,
    BulkItemResult,
    Event,
    EventRequest,
    HealthResponse,
    SearchCriteria,
)
from calendar_api.logging_config import configure_logging
from calendar_api.repos.memory import EventRepository
from calendar_api.services.sample_data import seed_events
from calendar_api.services.search import filter_by_date, search_events

logger = logging.getLogger(__name__)

PROBLEM_JSON = "application/problem+json"
CORRELATION_HEADER = "X-Correlation-Id"

_TITLES = {
    400: "Bad Request",
    404: "Not Found",
    500: "Internal Server Error",
}

router = APIRouter(prefix="/api", tags=["Events"])


def get_repository(request: Request) -> EventRepository:
    return request.app.state.event_repo


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def _overlap_error(conflicts: list[Event]) -> ConflictError:
    return ConflictError(
        "Event overlaps with an existing event",
        details={"conflictingEventIds": [c.id for c in conflicts]},
    )


# ── Routes ────────────────────────────────────────────────────────────


@router.post("/events", response_model=Event, status_code=201)
def create_event(
    payload: EventRequest,
    response: Response,
    repo: EventRepository = Depends(get_repository),
) -> Event:
    """Create an event unless it overlaps an existing one on the same day."""
    event = payload.to_event()
    conflicts = repo.conflicts(event)
    if conflicts:
        logger.info(
            "Rejected event on %s at %s: overlaps %s",
            event.date,
            event.time,
            [c.id for c in conflicts],
        )
        raise _overlap_error(conflicts)

    event_id = repo.insert(event)
    logger.info("Event added. ID: %s, Title: %s", event_id, event.title)
    response.headers["Location"] = f"{router.prefix}/events/{event_id}"
    return event.model_copy(update={"id": event_id})


@router.post("/events/bulk", response_model=BulkCreateResponse)
def bulk_create_events(
    payload: BulkCreateRequest,
    repo: EventRepository = Depends(get_repository),
    settings: Settings = Depends(get_app_settings),
) -> BulkCreateResponse:
    """Create several events; each item succeeds or fails on its own."""
    if not payload.events:
        raise InvalidInputError("At least one event must be provided")
    if len(payload.events) > settings.bulk_max_events:
        raise InvalidInputError(
            f"Cannot create more than {settings.bulk_max_events} events in a single request"
        )

    results: list[BulkItemResult] = []
    for index, raw in enumerate(payload.events):
        try:
            event = EventRequest.model_validate(raw).to_event()
        except ValidationError as exc:
            results.append(BulkItemResult(index=index, success=False, error=_first_error(exc)))
            continue

        if repo.overlaps(event):
            results.append(
                BulkItemResult(index=index, success=False, error="Event overlaps with an existing event")
            )
            continue

        event_id = repo.insert(event)
        results.append(BulkItemResult(index=index, success=True, event_id=event_id))

    success_count = sum(1 for r in results if r.success)
    logger.info("Bulk create: %s of %s events created", success_count, len(results))
    return BulkCreateResponse(
        total_requested=len(payload.events),
        success_count=success_count,
        failure_count=len(payload.events) - success_count,
        results=results,
    )


@router.get("/events", response_model=list[Event])
def list_events(
    date: dt.date | None = Query(default=None),
    repo: EventRepository = Depends(get_repository),
) -> list[Event]:
    """Return all events ordered by date and time, optionally for one day."""
    events = repo.list_all()
    if date is not None:
        events = filter_by_date(events, date)
    return events


@router.get("/events/search", response_model=list[Event])
def search(
    query: str | None = None,
    start_date: dt.date | None = None,
    end_date: dt.date | None = None,
    time_of_day: str | None = None,
    min_duration: int | None = None,
    max_duration: int | None = None,
    sort_by: str = "date",
    sort_descending: bool = False,
    repo: EventRepository = Depends(get_repository),
) -> list[Event]:
    """Filter events by text, date range, time of day and duration."""
    criteria = SearchCriteria(
        query=query,
        start_date=start_date,
        end_date=end_date,
        time_of_day=time_of_day,
        min_duration=min_duration,
        max_duration=max_duration,
        sort_by=sort_by,
        sort_descending=sort_descending,
    )
    return search_events(repo.list_all(), criteria)


@router.get("/events/{event_id}", response_model=Event)
def get_event(event_id: int, repo: EventRepository = Depends(get_repository)) -> Event:
    """Return a single event by id."""
    event = repo.get(event_id)
    if event is None:
        logger.warning("Event with ID %s not found", event_id)
        raise NotFoundError(f"Event with ID {event_id} not found", details={"eventId": event_id})
    return event


@router.put("/events/{event_id}", response_model=Event)
def update_event(
    event_id: int,
    payload: EventRequest,
    repo: EventRepository = Depends(get_repository),
) -> Event:
    """Replace an event, keeping its id.

    Existence is checked before overlaps, so a missing id is a 404 even when
    the payload would also conflict.
    """
    if repo.get(event_id) is None:
        logger.warning("Attempted to update non-existent event with ID %s", event_id)
        raise NotFoundError(f"Event with ID {event_id} not found", details={"eventId": event_id})

    event = payload.to_event(event_id)
    conflicts = repo.conflicts(event, exclude_id=event_id)
    if conflicts:
        logger.info("Rejected update of event %s: overlaps %s", event_id, [c.id for c in conflicts])
        raise _overlap_error(conflicts)

    if not repo.update(event_id, event):
        # Deleted between the existence check and the update.
        raise NotFoundError(f"Event with ID {event_id} not found", details={"eventId": event_id})
    logger.info("Event updated. ID: %s, Title: %s", event_id, event.title)
    return event


@router.delete("/events/{event_id}", status_code=204)
def delete_event(event_id: int, repo: EventRepository = Depends(get_repository)) -> Response:
    """Delete an event by id."""
    if not repo.delete(event_id):
        logger.warning("Attempted to delete non-existent event with ID %s", event_id)
        raise NotFoundError(f"Event with ID {event_id} not found", details={"eventId": event_id})
    logger.info("Event deleted. ID: %s", event_id)
    return Response(status_code=204)


# ── Errors ────────────────────────────────────────────────────────────


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid event"
    err = errors[0]
    field = ".".join(str(part) for part in err.get("loc", ()))
    return f"{field}: {err.get('msg')}" if field else str(err.get("msg"))


def _correlation_id(request: Request) -> str:
    return getattr(request.state, "correlation_id", None) or uuid.uuid4().hex


def problem_response(
    request: Request,
    status_code: int,
    detail: str,
    error_code: str,
    details: Any = None,
) -> JSONResponse:
    """Build an RFC 7807 style problem body. ``None`` members are omitted."""
    body: dict[str, Any] = {
        "type": f"https://httpstatuses.io/{status_code}",
        "title": _TITLES.get(status_code, "Error"),
        "status": status_code,
        "detail": detail,
        "instance": request.url.path,
        "errorCode": error_code,
        "correlationId": _correlation_id(request),
        "details": details,
    }
    return JSONResponse(
        {k: v for k, v in body.items() if v is not None},
        status_code=status_code,
        media_type=PROBLEM_JSON,
    )


async def _handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("API error on %s: %s", request.url.path, exc.message)
    return problem_response(request, exc.status_code, exc.message, exc.error_code, exc.details)


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg"),
        }
        for err in exc.errors()
    ]
    return problem_response(
        request,
        400,
        "One or more validation errors occurred",
        InvalidInputError.error_code,
        fields,
    )


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled error on %s %s. CorrelationId: %s",
        request.method,
        request.url.path,
        _correlation_id(request),
    )
    return problem_response(request, 500, "An internal server error occurred", "INTERNAL_ERROR")


# ── Application ───────────────────────────────────────────────────────


def create_app(settings: Settings | None = None, repository: EventRepository | None = None) -> FastAPI:
    """Build the API around *repository*, or a new (optionally seeded) one."""
    settings = settings or get_settings()
    if repository is None:
        repository = EventRepository(start_id=settings.first_event_id)
        if settings.seed_sample_data:
            seeded = seed_events(repository)
            logger.info("Seeded %s sample events", len(seeded))

    app = FastAPI(title="Calendar Events API", version=settings.version)
    app.state.settings = settings
    app.state.event_repo = repository

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[CORRELATION_HEADER],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request.state.correlation_id = request.headers.get(CORRELATION_HEADER) or uuid.uuid4().hex
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            response = await _handle_unexpected(request, exc)
        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers[CORRELATION_HEADER] = request.state.correlation_id
        logger.info(
            "%s %s -> %s (%.1f ms) [%s]",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request.state.correlation_id,
        )
        return response

    app.add_exception_handler(ApiError, _handle_api_error)
    app.add_exception_handler(RequestValidationError, _handle_validation_error)
    app.add_exception_handler(Exception, _handle_unexpected)

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    def health() -> HealthResponse:
        return HealthResponse(
            status="healthy",
            service=settings.service_name,
            version=settings.version,
            timestamp=dt.datetime.now(dt.timezone.utc),
            events=repository.count(),
        )

    app.include_router(router)
    return app


# ── Singleton (created at import time for simplicity) ─────────────────
settings = get_settings()
configure_logging(settings.log_level, settings.log_file)
app = create_app(settings)
