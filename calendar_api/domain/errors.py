"""Error taxonomy shared by the store and the HTTP layer."""

from __future__ import annotations

from typing import Any


class ApiError(Exception):
    """Base error carrying the HTTP status and a stable error code."""

    status_code = 500
    error_code = "INTERNAL_ERROR"

    def __init__(self, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class InvalidInputError(ApiError):
    """A required value is missing or malformed. Always caller-correctable."""

    status_code = 400
    error_code = "VALIDATION_ERROR"


class NotFoundError(ApiError):
    status_code = 404
    error_code = "NOT_FOUND"


class ConflictError(ApiError):
    """The event overlaps an existing event on the same day."""

    status_code = 400
    error_code = "EVENT_OVERLAP"
