"""Season standings and start-date endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ...dependencies import get_actor, get_store
from ...services import seasons as season_service
from ...services.permissions import Actor
from ...services.store import ScoringStore
from .schemas import (
    SeasonResponse,
    SeasonStandingsResponse,
    SeasonStartDateRequest,
    StudioStandingResponse,
)

router = APIRouter(prefix="/seasons")


@router.get("/{season_id}/standings", response_model=SeasonStandingsResponse)
async def get_season_standings(
    season_id: int,
    actor: Actor = Depends(get_actor),
    store: ScoringStore = Depends(get_store),
) -> SeasonStandingsResponse:
    standings = await season_service.get_season_standings(store, actor, season_id)
    return SeasonStandingsResponse(
        season_id=season_id,
        standings=[
            StudioStandingResponse(
                studio_id=standing.studio_id,
                weekly_points=standing.weekly_points,
                award_points=standing.award_points,
                weeks_ranked=standing.weeks_ranked,
            )
            for standing in standings
        ],
    )


@router.patch("/{season_id}/start-date", response_model=SeasonResponse)
async def update_season_start_date(
    season_id: int,
    payload: SeasonStartDateRequest,
    actor: Actor = Depends(get_actor),
    store: ScoringStore = Depends(get_store),
) -> SeasonResponse:
    season = await season_service.update_season_start_date(
        store, actor, season_id, payload.start_date
    )
    return SeasonResponse(
        id=season.id,
        league_id=season.league_id,
        label=season.label,
        start_date=season.start_date,
        end_date=season.end_date,
        week_count=season.week_count,
    )
