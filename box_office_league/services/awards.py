"""Award bonus applier.

Credits nomination/win points for a league award category to whichever
studio holds the movie in the season. Bonuses are a separate ledger and are
never folded into weekly rankings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from ..db.awards import AwardResult
from ..errors import BadRequestError, ConflictError, NotFoundError
from .compute_week import load_season_context
from .ownership_ledger import current_owner
from .permissions import Actor, Capability, load_auth_context, require
from .unique_insert import insert_unique

logger = logging.getLogger(__name__)

CATEGORY_UNAVAILABLE_MESSAGE = "Category disabled or not found for this league"
DUPLICATE_BONUS_MESSAGE = "Award bonus already applied for this category and result"
NOT_OWNED_MESSAGE = "Movie not owned this season"

DEFAULT_NOMINATION_POINTS = 1.0
DEFAULT_WIN_POINTS = 2.0


@dataclass(frozen=True)
class AwardCategory:
    key: str
    enabled: bool = True
    nomination_points: float = DEFAULT_NOMINATION_POINTS
    win_points: float = DEFAULT_WIN_POINTS

    @classmethod
    def from_config(cls, raw: Mapping[str, Any]) -> "AwardCategory":
        enabled = raw.get("enabled")
        nomination = raw.get("nominationPoints")
        win = raw.get("winPoints")
        return cls(
            key=str(raw["key"]),
            enabled=True if enabled is None else bool(enabled),
            nomination_points=DEFAULT_NOMINATION_POINTS if nomination is None else float(nomination),
            win_points=DEFAULT_WIN_POINTS if win is None else float(win),
        )

    def points_for(self, result: AwardResult) -> float:
        if result is AwardResult.win:
            return self.win_points
        return self.nomination_points


def find_category(categories: Iterable[Mapping[str, Any]] | None, key: str) -> AwardCategory | None:
    for raw in categories or []:
        if raw.get("key") == key:
            return AwardCategory.from_config(raw)
    return None


def parse_award_result(value: object) -> AwardResult:
    try:
        return AwardResult(value)
    except ValueError:
        raise BadRequestError(
            "result must be 'nom' or 'win'",
            fields=[{"field": "result", "message": "must be one of: nom, win"}],
        ) from None


def resolve_award_points(league: Any, category_key: str, result: AwardResult) -> float:
    """Points the league awards for a result in a category; BadRequest if unavailable."""
    category = find_category(league.award_categories, category_key)
    if category is None or not category.enabled:
        raise BadRequestError(
            CATEGORY_UNAVAILABLE_MESSAGE,
            fields=[{"field": "categoryKey", "message": CATEGORY_UNAVAILABLE_MESSAGE}],
        )
    return category.points_for(result)


@dataclass(frozen=True)
class AppliedBonus:
    points: float
    bonus_id: int


async def apply_award_bonus(
    store: Any,
    actor: Actor,
    season_id: int,
    category_key: str,
    movie_id: int,
    result: object,
) -> AppliedBonus:
    season, league = await load_season_context(store, season_id)
    require(Capability.manage_league, await load_auth_context(store, actor, league))

    award_result = parse_award_result(result)
    points = resolve_award_points(league, category_key, award_result)

    ownership = current_owner(await store.list_ownerships(season.id), movie_id)
    if ownership is None:
        raise NotFoundError(NOT_OWNED_MESSAGE)

    key = dict(
        season_id=season.id,
        studio_id=ownership.studio_id,
        movie_id=movie_id,
        category_key=category_key,
        result=award_result.value,
    )
    if await store.find_award_bonus(**key) is not None:
        raise ConflictError(DUPLICATE_BONUS_MESSAGE)

    async def _insert(values: dict[str, Any]) -> Any:
        return await store.insert_award_bonus(league_id=league.id, points=points, **values)

    bonus = await insert_unique(_insert, key, conflict_message=DUPLICATE_BONUS_MESSAGE)

    logger.info(
        "Award bonus applied",
        extra={
            "season_id": season.id,
            "studio_id": ownership.studio_id,
            "movie_id": movie_id,
            "category_key": category_key,
            "result": award_result.value,
            "points": points,
        },
    )
    return AppliedBonus(points=points, bonus_id=bonus.id)


async def list_award_bonuses(store: Any, actor: Actor, season_id: int) -> list[Any]:
    season, league = await load_season_context(store, season_id)
    require(Capability.view_league, await load_auth_context(store, actor, league))
    return await store.list_award_bonuses(season.id)


async def delete_award_bonus(store: Any, actor: Actor, bonus_id: int) -> None:
    bonus = await store.get_award_bonus(bonus_id)
    if bonus is None:
        raise NotFoundError("Award bonus not found")
    league = await store.get_league(bonus.league_id)
    if league is None:
        raise NotFoundError("League not found")
    require(Capability.manage_league, await load_auth_context(store, actor, league))

    await store.delete_award_bonus(bonus)
    logger.info("Award bonus deleted", extra={"bonus_id": bonus_id, "season_id": bonus.season_id})
