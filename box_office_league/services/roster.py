"""Acquire and retire movies: the mutating side of the ownership ledger."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from ..errors import BadRequestError, NotFoundError
from ..utils.datetime_utils import ensure_aware, now_utc
from ..utils.pagination import PageParams
from .acquisition_window import enforce_acquisition_window
from .compute_week import load_season_context
from .ownership_ledger import ALREADY_OWNED_MESSAGE, ensure_can_acquire, ensure_can_retire, retire
from .permissions import Actor, Capability, load_auth_context, require
from .unique_insert import insert_unique
from .week_window import week_containing

logger = logging.getLogger(__name__)

BACKDATED_MESSAGE = "Acquisition time cannot precede the current scoring week"


def _ensure_not_backdated(season: Any, league: Any, acquired_at: datetime, now: datetime) -> None:
    current = week_containing(
        season.start_date, now, league.timezone, league.week_anchor_weekday
    )
    if current is not None and acquired_at < current.week_start:
        raise BadRequestError(
            BACKDATED_MESSAGE,
            fields=[{"field": "acquiredAt", "message": BACKDATED_MESSAGE}],
        )


async def acquire_movie(
    store: Any,
    actor: Actor,
    *,
    league_id: int,
    season_id: int,
    studio_id: int,
    movie_id: int,
    purchase_price: int,
    acquired_at: datetime,
    now: datetime | None = None,
) -> Any:
    """Record a studio's acquisition of a movie for a season."""
    season = await store.get_season(season_id)
    if season is None or season.league_id != league_id:
        raise NotFoundError("Season not found in league")
    league = await store.get_league(league_id)
    if league is None:
        raise NotFoundError("League not found")
    studio = await store.get_studio(studio_id)
    if studio is None or studio.league_id != league_id:
        raise NotFoundError("Studio not found in league")

    ctx = await load_auth_context(store, actor, league, target_studio_id=studio_id)
    require(Capability.manage_studio, ctx)
    now = now or now_utc()
    enforce_acquisition_window(league.timezone, now=now, league_id=league_id)
    acquired_at = ensure_aware(acquired_at)
    _ensure_not_backdated(season, league, acquired_at, now)

    ensure_can_acquire(await store.find_ownership(season_id, movie_id))

    async def _insert(key: tuple[int, int]) -> Any:
        key_season_id, key_movie_id = key
        return await store.insert_ownership(
            league_id=league_id,
            season_id=key_season_id,
            studio_id=studio_id,
            movie_id=key_movie_id,
            purchase_price=purchase_price,
            acquired_at=acquired_at,
            retired_at=None,
            refund_applied=False,
        )

    # A concurrent acquisition that wins the race surfaces as a unique
    # violation here and becomes the same Conflict as the check above.
    ownership = await insert_unique(
        _insert, (season_id, movie_id), conflict_message=ALREADY_OWNED_MESSAGE
    )

    logger.info(
        "Movie acquired",
        extra={
            "league_id": league_id,
            "season_id": season_id,
            "studio_id": studio_id,
            "movie_id": movie_id,
            "ownership_id": ownership.id,
        },
    )
    return ownership


async def retire_ownership(
    store: Any,
    actor: Actor,
    ownership_id: int,
    now: datetime | None = None,
) -> Any:
    """Retire an active ownership held by one of the actor's studios."""
    ownership = await store.get_ownership(ownership_id)
    if ownership is None:
        raise NotFoundError("Ownership not found")
    league = await store.get_league(ownership.league_id)
    if league is None:
        raise NotFoundError("League not found")

    ctx = await load_auth_context(store, actor, league, target_studio_id=ownership.studio_id)
    ensure_can_retire(ownership, ctx.member_studio_ids)
    enforce_acquisition_window(league.timezone, now=now, league_id=league.id)

    retire(ownership, now or now_utc())
    ownership = await store.save(ownership)

    logger.info(
        "Ownership retired",
        extra={
            "ownership_id": ownership.id,
            "studio_id": ownership.studio_id,
            "movie_id": ownership.movie_id,
        },
    )
    return ownership


async def list_season_ownerships(
    store: Any, actor: Actor, season_id: int, page: PageParams
) -> tuple[list[Any], int]:
    _, league = await load_season_context(store, season_id)
    require(Capability.view_league, await load_auth_context(store, actor, league))
    return await store.page_ownerships(season_id=season_id, offset=page.offset, limit=page.limit)


async def list_studio_ownerships(
    store: Any, actor: Actor, studio_id: int, page: PageParams
) -> tuple[list[Any], int]:
    studio = await store.get_studio(studio_id)
    if studio is None:
        raise NotFoundError("Studio not found")
    league = await store.get_league(studio.league_id)
    if league is None:
        raise NotFoundError("League not found")
    require(Capability.view_league, await load_auth_context(store, actor, league))
    return await store.page_ownerships(studio_id=studio_id, offset=page.offset, limit=page.limit)
