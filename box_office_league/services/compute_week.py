"""Weekly scoring cycle: window -> ownership -> revenue totals -> ranking.

Triggered explicitly (commissioner action or an external scheduler); there
is no in-process scheduler. Each derived write is an idempotent upsert, so
recomputing an unchanged week reproduces the same rows, and a failure part
way through is corrected by running the computation again.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..errors import InvalidWeekIndexError, NotFoundError
from .ownership_ledger import owners_for_week
from .permissions import Actor, Capability, load_auth_context, require
from .ranking import PointsPolicy, RankingRow, rank_studios
from .revenue_aggregator import aggregate_studio_totals
from .scoring_types import StudioId, StudioTotals
from .week_window import WeekWindow, compute_week_window, validate_week_index

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WeekComputation:
    window: WeekWindow
    studios_updated: int
    totals: dict[StudioId, StudioTotals]
    ranking: list[RankingRow]


async def load_season_context(store: Any, season_id: int) -> tuple[Any, Any]:
    """Return (season, league) or raise NotFoundError."""
    season = await store.get_season(season_id)
    if season is None:
        raise NotFoundError("Season not found")
    league = await store.get_league(season.league_id)
    if league is None:
        raise NotFoundError("League not found")
    return season, league


def season_week_window(season: Any, league: Any, week_index: object) -> WeekWindow:
    """Window for a week of this season, rejecting indices past the season's end."""
    index = validate_week_index(week_index)
    if season.week_count is not None and index >= season.week_count:
        raise InvalidWeekIndexError(
            index, f"Week index must be between 0 and {season.week_count - 1}"
        )
    return compute_week_window(
        season.start_date,
        index,
        league.timezone,
        league.week_anchor_weekday,
    )


async def compute_week(
    store: Any,
    actor: Actor,
    season_id: int,
    week_index: object,
) -> WeekComputation:
    """Recompute studio totals and the ranking table for one scoring week."""
    validate_week_index(week_index)
    season, league = await load_season_context(store, season_id)
    require(Capability.manage_league, await load_auth_context(store, actor, league))

    window = season_week_window(season, league, week_index)

    ownerships = await store.list_ownerships(season.id)
    owner_by_movie = owners_for_week(ownerships, window)
    revenue_rows = await store.list_movie_revenue(window.start_utc, window.end_utc)
    totals = aggregate_studio_totals(revenue_rows, owner_by_movie)

    for studio_id, studio_totals in totals.items():
        await store.upsert_studio_weekly_revenue(
            league_id=league.id,
            season_id=season.id,
            studio_id=studio_id,
            window=window,
            totals=studio_totals,
        )
    removed = await store.delete_stale_studio_weekly_revenue(
        season.id, window.week_index, keep=totals.keys()
    )

    ranking = rank_studios(totals, PointsPolicy.from_league(league))
    await store.replace_weekly_ranking(
        league_id=league.id,
        season_id=season.id,
        week_index=window.week_index,
        rows=[row.to_dict() for row in ranking],
    )

    logger.info(
        "Computed scoring week",
        extra={
            "season_id": season.id,
            "week_index": window.week_index,
            "week_start": window.week_start.isoformat(),
            "week_end": window.week_end.isoformat(),
            "owned_movies": len(owner_by_movie),
            "revenue_rows": len(revenue_rows),
            "studios_updated": len(totals),
            "stale_rows_removed": removed,
        },
    )

    return WeekComputation(
        window=window,
        studios_updated=len(totals),
        totals=totals,
        ranking=ranking,
    )


async def get_studio_weekly_totals(
    store: Any, actor: Actor, season_id: int, week_index: object
) -> list[Any]:
    validate_week_index(week_index)
    season, league = await load_season_context(store, season_id)
    require(Capability.view_league, await load_auth_context(store, actor, league))
    return await store.list_studio_weekly_revenue(season.id, week_index)


async def get_weekly_ranking(
    store: Any, actor: Actor, season_id: int, week_index: object
) -> Any:
    validate_week_index(week_index)
    season, league = await load_season_context(store, season_id)
    require(Capability.view_league, await load_auth_context(store, actor, league))

    ranking = await store.get_weekly_ranking(season.id, week_index)
    if ranking is None:
        raise NotFoundError("No ranking for that week")
    return ranking
