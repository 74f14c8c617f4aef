"""In-memory stand-in for ScoringStore used by service and route tests."""

from __future__ import annotations

from datetime import date, datetime, timezone
from itertools import count
from types import SimpleNamespace
from typing import Any, Iterable
from zoneinfo import ZoneInfo

from box_office_league.services.permissions import Actor
from box_office_league.services.scoring_types import StudioTotals
from box_office_league.services.store import DuplicateKeyError
from box_office_league.services.week_window import WeekWindow

NEW_YORK = ZoneInfo("America/New_York")
FIXED_NOW = datetime(2024, 1, 3, 15, 0, tzinfo=timezone.utc)

OWNER = Actor(user_id="owner-1")
COMMISSIONER = Actor(user_id="commish-1")
PLAYER_A = Actor(user_id="player-a")
PLAYER_B = Actor(user_id="player-b")
OUTSIDER = Actor(user_id="stranger")


def make_league(**overrides: Any) -> SimpleNamespace:
    values = dict(
        id=1,
        name="Test League",
        owner_user_id="owner-1",
        commissioner_user_ids=[],
        timezone="America/New_York",
        budget_cap=100,
        points_scheme="optionB",
        custom_point_table=None,
        ranking_basis="worldwide",
        week_anchor_weekday=None,
        award_categories=[
            {"key": "bestPicture", "enabled": True, "nominationPoints": 3, "winPoints": 5},
            {"key": "bestActor"},
            {"key": "bestScore", "enabled": False},
        ],
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def make_season(**overrides: Any) -> SimpleNamespace:
    values = dict(
        id=10,
        league_id=1,
        label="2024",
        start_date=date(2024, 1, 2),
        end_date=date(2024, 12, 31),
        week_count=52,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def make_studio(**overrides: Any) -> SimpleNamespace:
    values = dict(id=100, league_id=1, name="Studio")
    values.update(overrides)
    return SimpleNamespace(**values)


def make_revenue(movie_id: int, week_start: datetime, worldwide: int, domestic: int = 0) -> SimpleNamespace:
    return SimpleNamespace(
        movie_id=movie_id,
        week_start=week_start,
        week_end=week_start,
        domestic_gross=domestic,
        worldwide_gross=worldwide,
    )


class FakeStore:
    """Implements the ScoringStore coroutine interface over dictionaries."""

    def __init__(self) -> None:
        self._ids = count(1000)
        self.leagues: dict[int, Any] = {}
        self.seasons: dict[int, Any] = {}
        self.studios: dict[int, Any] = {}
        self.members: list[tuple[int, int, str]] = []
        self.ownerships: dict[int, Any] = {}
        self.revenue: list[Any] = []
        self.studio_weekly: dict[tuple[int, int, int], Any] = {}
        self.rankings: dict[tuple[int, int], Any] = {}
        self.bonuses: dict[int, Any] = {}
        self.saved: list[Any] = []

    # Seeding helpers

    def add_league(self, league: Any) -> Any:
        self.leagues[league.id] = league
        return league

    def add_season(self, season: Any) -> Any:
        self.seasons[season.id] = season
        return season

    def add_studio(self, studio: Any, members: Iterable[str] = ()) -> Any:
        self.studios[studio.id] = studio
        for user_id in members:
            self.members.append((studio.league_id, studio.id, user_id))
        return studio

    def add_revenue(self, row: Any) -> Any:
        self.revenue.append(row)
        return row

    def add_ownership(
        self,
        *,
        season_id: int = 10,
        studio_id: int,
        movie_id: int,
        acquired_at: datetime,
        retired_at: datetime | None = None,
        league_id: int = 1,
    ) -> Any:
        ownership = SimpleNamespace(
            id=next(self._ids),
            league_id=league_id,
            season_id=season_id,
            studio_id=studio_id,
            movie_id=movie_id,
            purchase_price=10,
            acquired_at=acquired_at,
            retired_at=retired_at,
            refund_applied=False,
        )
        self.ownerships[ownership.id] = ownership
        return ownership

    # League context

    async def get_league(self, league_id: int) -> Any:
        return self.leagues.get(league_id)

    async def get_season(self, season_id: int) -> Any:
        return self.seasons.get(season_id)

    async def get_studio(self, studio_id: int) -> Any:
        return self.studios.get(studio_id)

    async def studio_ids_for_user(self, league_id: int, user_id: str) -> set[int]:
        return {studio_id for lid, studio_id, uid in self.members if lid == league_id and uid == user_id}

    async def save(self, instance: Any) -> Any:
        self.saved.append(instance)
        return instance

    # Ownership ledger

    async def list_ownerships(self, season_id: int) -> list[Any]:
        rows = [o for o in self.ownerships.values() if o.season_id == season_id]
        return sorted(rows, key=lambda o: (o.acquired_at, o.id))

    async def find_ownership(self, season_id: int, movie_id: int) -> Any:
        for ownership in self.ownerships.values():
            if ownership.season_id == season_id and ownership.movie_id == movie_id:
                return ownership
        return None

    async def get_ownership(self, ownership_id: int) -> Any:
        return self.ownerships.get(ownership_id)

    async def insert_ownership(self, **values: Any) -> Any:
        if any(
            o.season_id == values["season_id"] and o.movie_id == values["movie_id"]
            for o in self.ownerships.values()
        ):
            raise DuplicateKeyError("uq_movie_ownership_season_movie")
        ownership = SimpleNamespace(id=next(self._ids), **values)
        self.ownerships[ownership.id] = ownership
        return ownership

    async def page_ownerships(
        self,
        *,
        season_id: int | None = None,
        studio_id: int | None = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[Any], int]:
        rows = [
            o
            for o in self.ownerships.values()
            if (season_id is None or o.season_id == season_id)
            and (studio_id is None or o.studio_id == studio_id)
        ]
        rows.sort(key=lambda o: (o.acquired_at, o.id), reverse=True)
        return rows[offset : offset + limit], len(rows)

    # Revenue and weekly snapshots

    async def list_movie_revenue(self, start: datetime, end: datetime) -> list[Any]:
        return [row for row in self.revenue if start <= row.week_start <= end]

    async def upsert_studio_weekly_revenue(
        self,
        *,
        league_id: int,
        season_id: int,
        studio_id: int,
        window: WeekWindow,
        totals: StudioTotals,
    ) -> Any:
        row = SimpleNamespace(
            league_id=league_id,
            season_id=season_id,
            studio_id=studio_id,
            week_index=window.week_index,
            week_start=window.start_utc,
            week_end=window.end_utc,
            total_domestic_gross=totals.domestic,
            total_worldwide_gross=totals.worldwide,
        )
        self.studio_weekly[(season_id, window.week_index, studio_id)] = row
        return row

    async def delete_stale_studio_weekly_revenue(
        self, season_id: int, week_index: int, keep: Iterable[int]
    ) -> int:
        keep_ids = set(keep)
        stale = [
            key
            for key in self.studio_weekly
            if key[0] == season_id and key[1] == week_index and key[2] not in keep_ids
        ]
        for key in stale:
            del self.studio_weekly[key]
        return len(stale)

    async def list_studio_weekly_revenue(self, season_id: int, week_index: int) -> list[Any]:
        rows = [
            row
            for (sid, week, _), row in self.studio_weekly.items()
            if sid == season_id and week == week_index
        ]
        return sorted(rows, key=lambda row: row.studio_id)

    async def replace_weekly_ranking(
        self,
        *,
        league_id: int,
        season_id: int,
        week_index: int,
        rows: list[dict[str, Any]],
    ) -> Any:
        ranking = SimpleNamespace(
            league_id=league_id,
            season_id=season_id,
            week_index=week_index,
            rows=list(rows),
            updated_at=FIXED_NOW,
        )
        self.rankings[(season_id, week_index)] = ranking
        return ranking

    async def get_weekly_ranking(self, season_id: int, week_index: int) -> Any:
        return self.rankings.get((season_id, week_index))

    async def list_weekly_rankings(self, season_id: int) -> list[Any]:
        return [self.rankings[key] for key in sorted(self.rankings) if key[0] == season_id]

    async def has_computed_weeks(self, season_id: int) -> bool:
        return any(key[0] == season_id for key in self.rankings) or any(
            key[0] == season_id for key in self.studio_weekly
        )

    # Award bonuses

    async def find_award_bonus(
        self,
        *,
        season_id: int,
        studio_id: int,
        movie_id: int,
        category_key: str,
        result: str,
    ) -> Any:
        for bonus in self.bonuses.values():
            if (bonus.season_id, bonus.studio_id, bonus.movie_id, bonus.category_key, bonus.result) == (
                season_id,
                studio_id,
                movie_id,
                category_key,
                result,
            ):
                return bonus
        return None

    async def insert_award_bonus(self, **values: Any) -> Any:
        key = {k: values[k] for k in ("season_id", "studio_id", "movie_id", "category_key", "result")}
        if await self.find_award_bonus(**key) is not None:
            raise DuplicateKeyError("uq_award_bonus_tuple")
        bonus = SimpleNamespace(id=next(self._ids), awarded_at=FIXED_NOW, **values)
        self.bonuses[bonus.id] = bonus
        return bonus

    async def list_award_bonuses(self, season_id: int) -> list[Any]:
        rows = [b for b in self.bonuses.values() if b.season_id == season_id]
        return sorted(rows, key=lambda b: (b.awarded_at, b.id), reverse=True)

    async def get_award_bonus(self, bonus_id: int) -> Any:
        return self.bonuses.get(bonus_id)

    async def delete_award_bonus(self, bonus: Any) -> None:
        self.bonuses.pop(bonus.id, None)
