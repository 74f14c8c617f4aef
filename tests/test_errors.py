"""Tests for the error taxonomy and its HTTP mapping."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from box_office_league.errors import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    InvalidWeekIndexError,
    NotFoundError,
    ScoringError,
    WindowLockedError,
    register_error_handlers,
)


class TestErrorPayloads:
    """Tests for ScoringError.to_dict."""

    def test_without_fields(self) -> None:
        assert NotFoundError("Season not found").to_dict() == {
            "detail": "Season not found",
            "kind": "not_found",
            "errors": [],
        }

    def test_invalid_week_index_enumerates_field(self) -> None:
        payload = InvalidWeekIndexError(-3).to_dict()

        assert payload["kind"] == "invalid_week_index"
        assert payload["errors"] == [
            {"field": "weekIndex", "message": "Week index must be a non-negative integer"}
        ]


class TestErrorHandlers:
    """Tests for register_error_handlers."""

    @pytest.mark.parametrize(
        ("error", "status_code", "kind"),
        [
            (NotFoundError("missing"), 404, "not_found"),
            (ForbiddenError("nope"), 403, "forbidden"),
            (WindowLockedError("locked"), 403, "window_locked"),
            (ConflictError("dupe"), 409, "conflict"),
            (BadRequestError("bad"), 400, "bad_request"),
            (InvalidWeekIndexError("x"), 400, "invalid_week_index"),
        ],
    )
    def test_status_mapping(self, error: ScoringError, status_code: int, kind: str) -> None:
        app = FastAPI()
        register_error_handlers(app)

        @app.get("/boom")
        async def boom() -> None:
            raise error

        response = TestClient(app).get("/boom")

        assert response.status_code == status_code
        assert response.json()["kind"] == kind
        assert response.json()["detail"] == error.message
