"""Roster endpoints: acquire, retire and list movie ownerships."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, status

from ...dependencies import get_actor, get_store
from ...services import roster
from ...services.permissions import Actor
from ...services.store import ScoringStore
from ...utils.datetime_utils import now_utc
from ...utils.pagination import Page, PageParams, page_params
from .schemas import AcquireMovieRequest, OwnershipResponse

router = APIRouter(prefix="/ownership")


def _serialize(ownership: Any) -> OwnershipResponse:
    return OwnershipResponse(
        id=ownership.id,
        league_id=ownership.league_id,
        season_id=ownership.season_id,
        studio_id=ownership.studio_id,
        movie_id=ownership.movie_id,
        purchase_price=ownership.purchase_price,
        acquired_at=ownership.acquired_at,
        retired_at=ownership.retired_at,
        refund_applied=bool(ownership.refund_applied),
    )


def _page(items: list[Any], total: int, params: PageParams) -> Page[OwnershipResponse]:
    return Page[OwnershipResponse](
        data=[_serialize(item) for item in items],
        page=params.page,
        limit=params.limit,
        total=total,
    )


@router.post("", response_model=OwnershipResponse, status_code=status.HTTP_201_CREATED)
async def acquire_movie(
    payload: AcquireMovieRequest,
    actor: Actor = Depends(get_actor),
    store: ScoringStore = Depends(get_store),
) -> OwnershipResponse:
    ownership = await roster.acquire_movie(
        store,
        actor,
        league_id=payload.league_id,
        season_id=payload.season_id,
        studio_id=payload.studio_id,
        movie_id=payload.movie_id,
        purchase_price=payload.purchase_price,
        acquired_at=payload.acquired_at or now_utc(),
    )
    return _serialize(ownership)


@router.patch("/{ownership_id}/retire", response_model=OwnershipResponse)
async def retire_ownership(
    ownership_id: int,
    actor: Actor = Depends(get_actor),
    store: ScoringStore = Depends(get_store),
) -> OwnershipResponse:
    ownership = await roster.retire_ownership(store, actor, ownership_id)
    return _serialize(ownership)


@router.get("/by-season/{season_id}", response_model=Page[OwnershipResponse])
async def list_by_season(
    season_id: int,
    params: PageParams = Depends(page_params),
    actor: Actor = Depends(get_actor),
    store: ScoringStore = Depends(get_store),
) -> Page[OwnershipResponse]:
    items, total = await roster.list_season_ownerships(store, actor, season_id, params)
    return _page(items, total, params)


@router.get("/by-studio/{studio_id}", response_model=Page[OwnershipResponse])
async def list_by_studio(
    studio_id: int,
    params: PageParams = Depends(page_params),
    actor: Actor = Depends(get_actor),
    store: ScoringStore = Depends(get_store),
) -> Page[OwnershipResponse]:
    items, total = await roster.list_studio_ownerships(store, actor, studio_id, params)
    return _page(items, total, params)
