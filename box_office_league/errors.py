"""Caller-visible error taxonomy for scoring operations.

Every error carries a machine-checkable ``kind`` and a human-readable
``message``. Validation failures also enumerate the offending fields.
None of these indicate a crashed process; the API layer maps each kind to
an HTTP status in ``register_error_handlers``.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ScoringError(Exception):
    """Base class for recoverable scoring errors."""

    kind = "error"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, fields: list[dict[str, str]] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.fields = fields or []

    def to_dict(self) -> dict[str, Any]:
        return {"detail": self.message, "kind": self.kind, "errors": self.fields}


class NotFoundError(ScoringError):
    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class ForbiddenError(ScoringError):
    kind = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN


class WindowLockedError(ForbiddenError):
    """Roster mutation attempted during the pre-scoring blackout."""

    kind = "window_locked"


class ConflictError(ScoringError):
    """Uniqueness violation: duplicate ownership, duplicate bonus, already retired."""

    kind = "conflict"
    status_code = status.HTTP_409_CONFLICT


class BadRequestError(ScoringError):
    kind = "bad_request"
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidWeekIndexError(BadRequestError):
    kind = "invalid_week_index"

    def __init__(self, week_index: object, reason: str = "Week index must be a non-negative integer") -> None:
        super().__init__(reason, fields=[{"field": "weekIndex", "message": reason}])
        self.week_index = week_index


async def _scoring_error_handler(request: Request, exc: ScoringError) -> JSONResponse:
    logger.info(
        "Scoring request rejected",
        extra={
            "kind": exc.kind,
            "path": request.url.path,
            "reason": exc.message,
        },
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def register_error_handlers(app: FastAPI) -> None:
    """Translate ScoringError subclasses into JSON responses."""
    app.add_exception_handler(ScoringError, _scoring_error_handler)
