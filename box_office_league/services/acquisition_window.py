"""Acquisition blackout around weekly score computation.

Roster changes are allowed from Tuesday 00:00 through Thursday 19:59 in the
league's local time and blocked from Thursday 20:00 through Monday 23:59,
so studios cannot pick up movies once the weekend's grosses are known.
The check is stateless and re-evaluated on every request.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import NamedTuple

from ..config import settings
from ..errors import WindowLockedError
from ..utils.datetime_utils import now_utc, to_local

logger = logging.getLogger(__name__)

OPEN_WEEKDAYS = frozenset({1, 2})  # Tuesday, Wednesday
LAST_OPEN_WEEKDAY = 3  # Thursday
LOCK_HOUR = 20

LOCKED_REASON = "Roster acquisitions are locked for the current scoring week."


class WindowDecision(NamedTuple):
    allowed: bool
    reason: str | None = None


def check_acquisition_window(now: datetime, timezone_name: str | None) -> WindowDecision:
    """Evaluate the blackout policy for a moment in the league's timezone."""
    local = to_local(now, timezone_name)
    weekday = local.weekday()
    allowed = weekday in OPEN_WEEKDAYS or (
        weekday == LAST_OPEN_WEEKDAY and local.hour < LOCK_HOUR
    )
    if allowed:
        return WindowDecision(allowed=True)
    return WindowDecision(allowed=False, reason=LOCKED_REASON)


def enforce_acquisition_window(
    timezone_name: str | None,
    now: datetime | None = None,
    league_id: int | None = None,
) -> None:
    """Raise WindowLockedError if roster changes are currently blocked."""
    if not settings.acquisition_window_enforced:
        return

    decision = check_acquisition_window(now or now_utc(), timezone_name)
    if not decision.allowed:
        logger.info(
            "Roster change blocked by acquisition window",
            extra={"league_id": league_id, "timezone": timezone_name},
        )
        raise WindowLockedError(decision.reason or LOCKED_REASON)
