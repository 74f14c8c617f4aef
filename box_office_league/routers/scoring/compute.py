"""Weekly computation and snapshot read endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...dependencies import get_actor, get_store
from ...services import compute_week as compute_service
from ...services.permissions import Actor
from ...services.ranking import RankingRow
from ...services.store import ScoringStore
from .schemas import (
    ComputeWeekResponse,
    RankingRowResponse,
    StudioWeeklyRevenueResponse,
    WeekWindowResponse,
    WeeklyRankingResponse,
)

router = APIRouter()


def _ranking_row(row: RankingRow) -> RankingRowResponse:
    return RankingRowResponse(
        studio_id=row.studio_id, rank=row.rank, points=row.points, revenue=row.revenue
    )


@router.post(
    "/seasons/{season_id}/compute/week/{week_index}",
    response_model=ComputeWeekResponse,
    status_code=status.HTTP_201_CREATED,
)
async def compute_week(
    season_id: int,
    week_index: int,
    actor: Actor = Depends(get_actor),
    store: ScoringStore = Depends(get_store),
) -> ComputeWeekResponse:
    """Recompute studio totals and the ranking for one week (idempotent)."""
    result = await compute_service.compute_week(store, actor, season_id, week_index)
    window = result.window
    return ComputeWeekResponse(
        window=WeekWindowResponse(
            week_index=window.week_index,
            week_start=window.week_start,
            week_end=window.week_end,
            timezone=str(window.week_start.tzinfo),
        ),
        studios_updated=result.studios_updated,
        ranking=[_ranking_row(row) for row in result.ranking],
    )


@router.get(
    "/seasons/{season_id}/studios/week/{week_index}",
    response_model=list[StudioWeeklyRevenueResponse],
)
async def get_studio_weekly_totals(
    season_id: int,
    week_index: int,
    actor: Actor = Depends(get_actor),
    store: ScoringStore = Depends(get_store),
) -> list[StudioWeeklyRevenueResponse]:
    rows = await compute_service.get_studio_weekly_totals(store, actor, season_id, week_index)
    return [
        StudioWeeklyRevenueResponse(
            studio_id=row.studio_id,
            season_id=row.season_id,
            week_index=row.week_index,
            week_start=row.week_start,
            week_end=row.week_end,
            total_domestic_gross=row.total_domestic_gross,
            total_worldwide_gross=row.total_worldwide_gross,
        )
        for row in rows
    ]


@router.get(
    "/seasons/{season_id}/rankings/week/{week_index}",
    response_model=WeeklyRankingResponse,
)
async def get_weekly_ranking(
    season_id: int,
    week_index: int,
    actor: Actor = Depends(get_actor),
    store: ScoringStore = Depends(get_store),
) -> WeeklyRankingResponse:
    ranking = await compute_service.get_weekly_ranking(store, actor, season_id, week_index)
    return WeeklyRankingResponse(
        season_id=ranking.season_id,
        week_index=ranking.week_index,
        rows=[_ranking_row(RankingRow.from_dict(payload)) for payload in ranking.rows],
        updated_at=ranking.updated_at,
    )
