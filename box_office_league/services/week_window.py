"""
Scoring week window calculations.

A season is divided into zero-indexed 7-day scoring weeks anchored to the
season start date, interpreted at local midnight in the league timezone.
Used to decide which ownerships and revenue rows belong to a week.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import NamedTuple

from ..errors import InvalidWeekIndexError
from ..utils.datetime_utils import ensure_aware, resolve_zone

WEEK_LENGTH = timedelta(days=7)
WINDOW_RESOLUTION = timedelta(milliseconds=1)

TUESDAY = 1


class WeekWindow(NamedTuple):
    """Inclusive [week_start, week_end] bounds of a scoring week."""

    week_index: int
    week_start: datetime
    week_end: datetime

    @property
    def start_utc(self) -> datetime:
        return self.week_start.astimezone(timezone.utc)

    @property
    def end_utc(self) -> datetime:
        return self.week_end.astimezone(timezone.utc)

    def contains(self, moment: datetime) -> bool:
        return self.week_start <= moment <= self.week_end


def validate_week_index(week_index: object) -> int:
    """Return the week index if it is a non-negative integer, else raise."""
    if isinstance(week_index, bool) or not isinstance(week_index, int):
        raise InvalidWeekIndexError(week_index)
    if week_index < 0:
        raise InvalidWeekIndexError(week_index)
    return week_index


def compute_week_window(
    season_start: date,
    week_index: int,
    timezone_name: str | None = None,
    anchor_weekday: int | None = None,
) -> WeekWindow:
    """
    Calculate the scoring window for a week of a season.

    Args:
        season_start: Calendar day that anchors week 0
        week_index: Zero-based week number
        timezone_name: League IANA timezone (defaults to America/New_York)
        anchor_weekday: Optional weekday (0=Monday) that week starts snap
            forward to, e.g. TUESDAY for Tuesday-Monday scoring weeks

    Returns:
        WeekWindow where week_end = week_start + 7 days - 1ms

    Raises:
        InvalidWeekIndexError: If week_index is not a non-negative integer
    """
    validate_week_index(week_index)
    if isinstance(season_start, datetime):
        season_start = season_start.date()

    first_day = season_start + timedelta(weeks=week_index)
    if anchor_weekday is not None:
        first_day += timedelta(days=(anchor_weekday - first_day.weekday()) % 7)

    # Wall-clock arithmetic in the league zone keeps every week exactly
    # 7 local days long, including across DST transitions.
    week_start = datetime.combine(first_day, time.min, tzinfo=resolve_zone(timezone_name))
    week_end = week_start + WEEK_LENGTH - WINDOW_RESOLUTION
    return WeekWindow(week_index=week_index, week_start=week_start, week_end=week_end)


def week_containing(
    season_start: date,
    moment: datetime,
    timezone_name: str | None = None,
    anchor_weekday: int | None = None,
) -> WeekWindow | None:
    """Scoring week that contains ``moment``, or None before week 0 begins.

    Weeks are not capped at the season's week count here; callers that
    care about the season end check the index themselves.
    """
    first = compute_week_window(season_start, 0, timezone_name, anchor_weekday)
    local = ensure_aware(moment).astimezone(first.week_start.tzinfo)
    if local < first.week_start:
        return None
    index = (local.date() - first.week_start.date()).days // 7
    return compute_week_window(season_start, index, timezone_name, anchor_weekday)
