"""Snapshot store: durable reads and idempotent writes for the scoring cycle.

All derived writes are single-statement upserts keyed by the natural
uniqueness key, so concurrent recomputations of the same week end with
the last writer's state and never a partial row.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable

from sqlalchemy import delete, exists, func, or_, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.awards import AwardBonus
from ..db.league import League, Season, Studio, StudioMember
from ..db.ownership import MovieOwnership
from ..db.revenue import MovieWeeklyRevenue, StudioWeeklyRevenue, WeeklyRanking
from ..utils.datetime_utils import now_utc
from .scoring_types import StudioId, StudioTotals
from .week_window import WeekWindow

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


class DuplicateKeyError(Exception):
    """An insert collided with a unique constraint."""


def _is_unique_violation(exc: IntegrityError) -> bool:
    code = getattr(exc.orig, "pgcode", None) or getattr(exc.orig, "sqlstate", None)
    return code == UNIQUE_VIOLATION


class ScoringStore:
    """Async persistence for leagues, ownerships, revenue and snapshots."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    # -------------------------------------------------------------------------
    # League context
    # -------------------------------------------------------------------------

    async def get_league(self, league_id: int) -> League | None:
        return await self.session.get(League, league_id)

    async def get_season(self, season_id: int) -> Season | None:
        return await self.session.get(Season, season_id)

    async def get_studio(self, studio_id: int) -> Studio | None:
        return await self.session.get(Studio, studio_id)

    async def studio_ids_for_user(self, league_id: int, user_id: str) -> set[int]:
        stmt = select(StudioMember.studio_id).where(
            StudioMember.league_id == league_id,
            StudioMember.user_id == user_id,
        )
        result = await self.session.execute(stmt)
        return set(result.scalars().all())

    async def save(self, instance: Any) -> Any:
        """Flush pending changes on an instance and reload server-side values."""
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def _insert(self, instance: Any) -> Any:
        try:
            async with self.session.begin_nested():
                self.session.add(instance)
        except IntegrityError as exc:
            if not _is_unique_violation(exc):
                raise
            raise DuplicateKeyError(str(exc.orig)) from exc
        await self.session.refresh(instance)
        return instance

    # -------------------------------------------------------------------------
    # Ownership ledger
    # -------------------------------------------------------------------------

    async def list_ownerships(self, season_id: int) -> list[MovieOwnership]:
        stmt = (
            select(MovieOwnership)
            .where(MovieOwnership.season_id == season_id)
            .order_by(MovieOwnership.acquired_at, MovieOwnership.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_ownership(self, season_id: int, movie_id: int) -> MovieOwnership | None:
        stmt = select(MovieOwnership).where(
            MovieOwnership.season_id == season_id,
            MovieOwnership.movie_id == movie_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_ownership(self, ownership_id: int) -> MovieOwnership | None:
        return await self.session.get(MovieOwnership, ownership_id)

    async def insert_ownership(self, **values: Any) -> MovieOwnership:
        return await self._insert(MovieOwnership(**values))

    async def page_ownerships(
        self,
        *,
        season_id: int | None = None,
        studio_id: int | None = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[MovieOwnership], int]:
        stmt = select(MovieOwnership)
        if season_id is not None:
            stmt = stmt.where(MovieOwnership.season_id == season_id)
        if studio_id is not None:
            stmt = stmt.where(MovieOwnership.studio_id == studio_id)

        count_stmt = select(func.count()).select_from(stmt.subquery())
        total = (await self.session.execute(count_stmt)).scalar() or 0

        stmt = (
            stmt.order_by(MovieOwnership.acquired_at.desc(), MovieOwnership.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    # -------------------------------------------------------------------------
    # Revenue and weekly snapshots
    # -------------------------------------------------------------------------

    async def list_movie_revenue(self, start: datetime, end: datetime) -> list[MovieWeeklyRevenue]:
        stmt = (
            select(MovieWeeklyRevenue)
            .where(MovieWeeklyRevenue.week_start >= start, MovieWeeklyRevenue.week_start <= end)
            .order_by(MovieWeeklyRevenue.movie_id, MovieWeeklyRevenue.week_start)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def upsert_studio_weekly_revenue(
        self,
        *,
        league_id: int,
        season_id: int,
        studio_id: StudioId,
        window: WeekWindow,
        totals: StudioTotals,
    ) -> StudioWeeklyRevenue:
        values = dict(
            league_id=league_id,
            week_start=window.start_utc,
            week_end=window.end_utc,
            total_domestic_gross=totals.domestic,
            total_worldwide_gross=totals.worldwide,
        )
        stmt = (
            insert(StudioWeeklyRevenue)
            .values(season_id=season_id, week_index=window.week_index, studio_id=studio_id, **values)
            .on_conflict_do_update(
                index_elements=["season_id", "week_index", "studio_id"],
                set_={**values, "updated_at": now_utc()},
            )
            .returning(StudioWeeklyRevenue)
        )
        result = await self.session.scalars(stmt, execution_options={"populate_existing": True})
        return result.one()

    async def delete_stale_studio_weekly_revenue(
        self, season_id: int, week_index: int, keep: Iterable[int]
    ) -> int:
        """Remove week totals for studios absent from the latest computation."""
        stmt = delete(StudioWeeklyRevenue).where(
            StudioWeeklyRevenue.season_id == season_id,
            StudioWeeklyRevenue.week_index == week_index,
        )
        keep_ids = list(keep)
        if keep_ids:
            stmt = stmt.where(StudioWeeklyRevenue.studio_id.not_in(keep_ids))
        result = await self.session.execute(stmt)
        return result.rowcount or 0

    async def list_studio_weekly_revenue(
        self, season_id: int, week_index: int
    ) -> list[StudioWeeklyRevenue]:
        stmt = (
            select(StudioWeeklyRevenue)
            .where(
                StudioWeeklyRevenue.season_id == season_id,
                StudioWeeklyRevenue.week_index == week_index,
            )
            .order_by(StudioWeeklyRevenue.studio_id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def replace_weekly_ranking(
        self,
        *,
        league_id: int,
        season_id: int,
        week_index: int,
        rows: list[dict[str, Any]],
    ) -> WeeklyRanking:
        stmt = (
            insert(WeeklyRanking)
            .values(league_id=league_id, season_id=season_id, week_index=week_index, rows=rows)
            .on_conflict_do_update(
                index_elements=["season_id", "week_index"],
                set_={"league_id": league_id, "rows": rows, "updated_at": now_utc()},
            )
            .returning(WeeklyRanking)
        )
        result = await self.session.scalars(stmt, execution_options={"populate_existing": True})
        return result.one()

    async def get_weekly_ranking(self, season_id: int, week_index: int) -> WeeklyRanking | None:
        stmt = select(WeeklyRanking).where(
            WeeklyRanking.season_id == season_id,
            WeeklyRanking.week_index == week_index,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_weekly_rankings(self, season_id: int) -> list[WeeklyRanking]:
        stmt = (
            select(WeeklyRanking)
            .where(WeeklyRanking.season_id == season_id)
            .order_by(WeeklyRanking.week_index)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def has_computed_weeks(self, season_id: int) -> bool:
        stmt = select(
            or_(
                exists().where(WeeklyRanking.season_id == season_id),
                exists().where(StudioWeeklyRevenue.season_id == season_id),
            )
        )
        return bool((await self.session.execute(stmt)).scalar())

    # -------------------------------------------------------------------------
    # Award bonuses
    # -------------------------------------------------------------------------

    async def find_award_bonus(
        self,
        *,
        season_id: int,
        studio_id: int,
        movie_id: int,
        category_key: str,
        result: str,
    ) -> AwardBonus | None:
        stmt = select(AwardBonus).where(
            AwardBonus.season_id == season_id,
            AwardBonus.studio_id == studio_id,
            AwardBonus.movie_id == movie_id,
            AwardBonus.category_key == category_key,
            AwardBonus.result == result,
        )
        found = await self.session.execute(stmt)
        return found.scalar_one_or_none()

    async def insert_award_bonus(self, **values: Any) -> AwardBonus:
        return await self._insert(AwardBonus(**values))

    async def list_award_bonuses(self, season_id: int) -> list[AwardBonus]:
        stmt = (
            select(AwardBonus)
            .where(AwardBonus.season_id == season_id)
            .order_by(AwardBonus.awarded_at.desc(), AwardBonus.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_award_bonus(self, bonus_id: int) -> AwardBonus | None:
        return await self.session.get(AwardBonus, bonus_id)

    async def delete_award_bonus(self, bonus: AwardBonus) -> None:
        await self.session.delete(bonus)
        await self.session.flush()
