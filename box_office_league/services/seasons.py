"""Season-level reads and edits that sit on top of the weekly snapshots."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any

from ..errors import BadRequestError, ConflictError
from .compute_week import load_season_context
from .permissions import Actor, Capability, load_auth_context, require
from .ranking import RankingRow

logger = logging.getLogger(__name__)

START_DATE_LOCKED_MESSAGE = "Season start date cannot change after weeks have been computed"


@dataclass
class StudioStanding:
    """Weekly points and award points kept apart; no combined total."""

    studio_id: int
    weekly_points: float = 0.0
    award_points: float = 0.0
    weeks_ranked: int = 0


async def get_season_standings(store: Any, actor: Actor, season_id: int) -> list[StudioStanding]:
    season, league = await load_season_context(store, season_id)
    require(Capability.view_league, await load_auth_context(store, actor, league))

    standings: dict[int, StudioStanding] = {}
    for ranking in await store.list_weekly_rankings(season.id):
        for payload in ranking.rows:
            row = RankingRow.from_dict(payload)
            standing = standings.setdefault(row.studio_id, StudioStanding(studio_id=row.studio_id))
            standing.weekly_points += row.points
            standing.weeks_ranked += 1

    for bonus in await store.list_award_bonuses(season.id):
        standing = standings.setdefault(bonus.studio_id, StudioStanding(studio_id=bonus.studio_id))
        standing.award_points += bonus.points

    return sorted(standings.values(), key=lambda s: (-s.weekly_points, s.studio_id))


async def update_season_start_date(
    store: Any, actor: Actor, season_id: int, start_date: date
) -> Any:
    """Move week 0; refused once any week of the season has been computed."""
    season, league = await load_season_context(store, season_id)
    require(Capability.manage_league, await load_auth_context(store, actor, league))

    if start_date >= season.end_date:
        raise BadRequestError(
            "startDate must be before the season end date",
            fields=[{"field": "startDate", "message": "must be before endDate"}],
        )
    if await store.has_computed_weeks(season.id):
        raise ConflictError(START_DATE_LOCKED_MESSAGE)

    previous = season.start_date
    season.start_date = start_date
    season = await store.save(season)
    logger.info(
        "Season start date updated",
        extra={
            "season_id": season.id,
            "previous": previous.isoformat(),
            "start_date": start_date.isoformat(),
        },
    )
    return season
