"""Tests for the acquisition blackout guard."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import patch
from zoneinfo import ZoneInfo

import pytest

from box_office_league.errors import ForbiddenError, WindowLockedError
from box_office_league.services.acquisition_window import (
    LOCKED_REASON,
    check_acquisition_window,
    enforce_acquisition_window,
)

NEW_YORK = ZoneInfo("America/New_York")


def local(*args: int) -> datetime:
    return datetime(*args, tzinfo=NEW_YORK)


class TestCheckAcquisitionWindow:
    """Tests for check_acquisition_window."""

    @pytest.mark.parametrize(
        "moment",
        [
            local(2024, 1, 2, 0, 0),     # Tuesday open
            local(2024, 1, 3, 10, 0),    # Wednesday
            local(2024, 1, 4, 19, 59),   # Thursday, last open minute
        ],
    )
    def test_open_moments(self, moment: datetime) -> None:
        decision = check_acquisition_window(moment, "America/New_York")

        assert decision.allowed is True
        assert decision.reason is None

    @pytest.mark.parametrize(
        "moment",
        [
            local(2024, 1, 4, 20, 0),    # Thursday lock
            local(2024, 1, 5, 12, 0),    # Friday
            local(2024, 1, 6, 10, 0),    # Saturday
            local(2024, 1, 7, 18, 0),    # Sunday
            local(2024, 1, 8, 23, 59),   # Monday, last locked minute
        ],
    )
    def test_locked_moments(self, moment: datetime) -> None:
        decision = check_acquisition_window(moment, "America/New_York")

        assert decision.allowed is False
        assert decision.reason == LOCKED_REASON

    def test_evaluated_in_league_timezone(self) -> None:
        # Thursday 19:30 in New York is already Friday 00:30 in UTC.
        moment = datetime(2024, 1, 5, 0, 30, tzinfo=timezone.utc)

        assert check_acquisition_window(moment, "America/New_York").allowed is True
        assert check_acquisition_window(moment, "UTC").allowed is False

    def test_naive_datetime_treated_as_utc(self) -> None:
        assert check_acquisition_window(datetime(2024, 1, 3, 15, 0), "UTC").allowed is True


class TestEnforceAcquisitionWindow:
    """Tests for enforce_acquisition_window."""

    def test_locked_raises_window_locked(self) -> None:
        with pytest.raises(WindowLockedError) as exc_info:
            enforce_acquisition_window("America/New_York", now=local(2024, 1, 6, 10, 0))

        assert exc_info.value.message == LOCKED_REASON
        assert exc_info.value.kind == "window_locked"
        assert exc_info.value.status_code == 403
        assert isinstance(exc_info.value, ForbiddenError)

    def test_open_does_not_raise(self) -> None:
        enforce_acquisition_window("America/New_York", now=local(2024, 1, 3, 10, 0))

    def test_uses_current_time_by_default(self) -> None:
        with patch(
            "box_office_league.services.acquisition_window.now_utc",
            return_value=local(2024, 1, 6, 10, 0),
        ):
            with pytest.raises(WindowLockedError):
                enforce_acquisition_window("America/New_York")

    def test_disabled_enforcement_allows_locked_moment(self) -> None:
        with patch("box_office_league.services.acquisition_window.settings") as mock_settings:
            mock_settings.acquisition_window_enforced = False

            enforce_acquisition_window("America/New_York", now=local(2024, 1, 6, 10, 0))
