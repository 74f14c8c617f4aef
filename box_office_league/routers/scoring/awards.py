"""Award bonus endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from ...dependencies import get_actor, get_store
from ...services import awards as award_service
from ...services.permissions import Actor
from ...services.store import ScoringStore
from .schemas import ApplyAwardRequest, ApplyAwardResponse, AwardBonusResponse

router = APIRouter()


@router.post(
    "/seasons/{season_id}/bonuses/apply",
    response_model=ApplyAwardResponse,
    status_code=status.HTTP_201_CREATED,
)
async def apply_award_bonus(
    season_id: int,
    payload: ApplyAwardRequest,
    actor: Actor = Depends(get_actor),
    store: ScoringStore = Depends(get_store),
) -> ApplyAwardResponse:
    applied = await award_service.apply_award_bonus(
        store,
        actor,
        season_id,
        category_key=payload.category_key,
        movie_id=payload.movie_id,
        result=payload.result,
    )
    return ApplyAwardResponse(points=applied.points, bonus_id=applied.bonus_id)


@router.get("/seasons/{season_id}/bonuses", response_model=list[AwardBonusResponse])
async def list_award_bonuses(
    season_id: int,
    actor: Actor = Depends(get_actor),
    store: ScoringStore = Depends(get_store),
) -> list[AwardBonusResponse]:
    bonuses = await award_service.list_award_bonuses(store, actor, season_id)
    return [
        AwardBonusResponse(
            id=bonus.id,
            season_id=bonus.season_id,
            studio_id=bonus.studio_id,
            movie_id=bonus.movie_id,
            category_key=bonus.category_key,
            result=bonus.result,
            points=bonus.points,
            awarded_at=bonus.awarded_at,
        )
        for bonus in bonuses
    ]


@router.delete("/bonuses/{bonus_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_award_bonus(
    bonus_id: int,
    actor: Actor = Depends(get_actor),
    store: ScoringStore = Depends(get_store),
) -> Response:
    await award_service.delete_award_bonus(store, actor, bonus_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
