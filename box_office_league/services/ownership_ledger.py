"""Ownership state machine for (season, movie) pairs.

Happy path: unowned -> owned(studio) -> retired(studio)

A movie can be owned at most once per season. Once any ownership row
exists, active or retired, further acquisitions are conflicts. Retirement
is terminal and only the owning studio may retire.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Protocol

from ..errors import ConflictError, ForbiddenError
from .scoring_types import MovieId, StudioId
from .week_window import WeekWindow

ALREADY_OWNED_MESSAGE = "Movie is already owned by a studio in this season"
ALREADY_RETIRED_MESSAGE = "Ownership already retired"
NOT_STUDIO_MEMBER_MESSAGE = "You do not have permission to manage this studio"


class OwnershipRecord(Protocol):
    movie_id: int
    studio_id: int
    acquired_at: datetime
    retired_at: datetime | None


def ensure_can_acquire(existing: OwnershipRecord | None) -> None:
    """Reject acquisition when the (season, movie) pair was ever owned."""
    if existing is not None:
        raise ConflictError(ALREADY_OWNED_MESSAGE)


def ensure_can_retire(ownership: OwnershipRecord, acting_studio_ids: Iterable[int]) -> None:
    """Only an active ownership held by one of the acting user's studios may retire."""
    if ownership.retired_at is not None:
        raise ConflictError(ALREADY_RETIRED_MESSAGE)
    if ownership.studio_id not in set(acting_studio_ids):
        raise ForbiddenError(NOT_STUDIO_MEMBER_MESSAGE)


def retire(ownership: OwnershipRecord, at: datetime) -> None:
    ownership.retired_at = at


def was_active_during(ownership: OwnershipRecord, window: WeekWindow) -> bool:
    """Ownership overlaps the scoring week: acquired by its end, not retired before its start."""
    if ownership.acquired_at > window.week_end:
        return False
    return ownership.retired_at is None or ownership.retired_at >= window.week_start


def owners_for_week(
    ownerships: Iterable[OwnershipRecord], window: WeekWindow
) -> dict[MovieId, StudioId]:
    """Map each movie to the studio that held it during the scoring week."""
    owner_by_movie: dict[MovieId, StudioId] = {}
    for ownership in ownerships:
        if was_active_during(ownership, window):
            owner_by_movie[MovieId(ownership.movie_id)] = StudioId(ownership.studio_id)
    return owner_by_movie


def current_owner(
    ownerships: Iterable[OwnershipRecord], movie_id: int
) -> OwnershipRecord | None:
    """Season-level ownership of a movie, regardless of week or retirement."""
    for ownership in ownerships:
        if ownership.movie_id == movie_id:
            return ownership
    return None
