"""Tests for the award bonus applier."""

from __future__ import annotations

from datetime import datetime

import pytest

from box_office_league.db.awards import AwardResult
from box_office_league.errors import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from box_office_league.services.awards import (
    CATEGORY_UNAVAILABLE_MESSAGE,
    DUPLICATE_BONUS_MESSAGE,
    AwardCategory,
    apply_award_bonus,
    delete_award_bonus,
    find_category,
    list_award_bonuses,
    resolve_award_points,
)

from .fakes import COMMISSIONER, NEW_YORK, OWNER, PLAYER_A, FakeStore, make_league

ACQUIRED = datetime(2024, 1, 3, 10, 0, tzinfo=NEW_YORK)


class TestAwardCategory:
    """Tests for category configuration parsing."""

    def test_defaults(self) -> None:
        category = AwardCategory.from_config({"key": "bestActor"})

        assert category == AwardCategory(
            key="bestActor", enabled=True, nomination_points=1.0, win_points=2.0
        )

    def test_explicit_values(self) -> None:
        category = AwardCategory.from_config(
            {"key": "bestPicture", "enabled": False, "nominationPoints": 0, "winPoints": 7}
        )

        assert category.enabled is False
        assert category.nomination_points == 0.0
        assert category.win_points == 7.0

    def test_find_category_missing(self) -> None:
        assert find_category([{"key": "bestActor"}], "bestPicture") is None
        assert find_category(None, "bestPicture") is None


class TestResolveAwardPoints:
    """Tests for resolve_award_points."""

    def test_win_and_nomination(self) -> None:
        league = make_league()

        assert resolve_award_points(league, "bestPicture", AwardResult.win) == 5.0
        assert resolve_award_points(league, "bestPicture", AwardResult.nomination) == 3.0

    @pytest.mark.parametrize("key", ["bestScore", "bestStunts"])
    def test_disabled_or_missing_category(self, key: str) -> None:
        with pytest.raises(BadRequestError, match=CATEGORY_UNAVAILABLE_MESSAGE):
            resolve_award_points(make_league(), key, AwardResult.win)


class TestApplyAwardBonus:
    """Tests for apply_award_bonus."""

    @pytest.mark.asyncio
    async def test_credits_owning_studio(self, store: FakeStore) -> None:
        store.add_ownership(studio_id=100, movie_id=501, acquired_at=ACQUIRED)

        applied = await apply_award_bonus(store, COMMISSIONER, 10, "bestPicture", 501, "win")

        assert applied.points == 5.0
        bonus = store.bonuses[applied.bonus_id]
        assert (bonus.studio_id, bonus.movie_id, bonus.result, bonus.points) == (100, 501, "win", 5.0)
        assert bonus.league_id == 1

    @pytest.mark.asyncio
    async def test_default_nomination_points(self, store: FakeStore) -> None:
        store.add_ownership(studio_id=100, movie_id=501, acquired_at=ACQUIRED)

        applied = await apply_award_bonus(store, OWNER, 10, "bestActor", 501, "nom")

        assert applied.points == 1.0

    @pytest.mark.asyncio
    async def test_applying_twice_conflicts(self, store: FakeStore) -> None:
        store.add_ownership(studio_id=100, movie_id=501, acquired_at=ACQUIRED)
        await apply_award_bonus(store, COMMISSIONER, 10, "bestPicture", 501, "win")

        with pytest.raises(ConflictError, match=DUPLICATE_BONUS_MESSAGE):
            await apply_award_bonus(store, COMMISSIONER, 10, "bestPicture", 501, "win")

        assert len(store.bonuses) == 1

    @pytest.mark.asyncio
    async def test_nomination_and_win_are_separate(self, store: FakeStore) -> None:
        store.add_ownership(studio_id=100, movie_id=501, acquired_at=ACQUIRED)

        await apply_award_bonus(store, COMMISSIONER, 10, "bestPicture", 501, "nom")
        await apply_award_bonus(store, COMMISSIONER, 10, "bestPicture", 501, "win")

        assert len(store.bonuses) == 2

    @pytest.mark.asyncio
    async def test_retired_ownership_still_credited(self, store: FakeStore) -> None:
        store.add_ownership(
            studio_id=200, movie_id=501, acquired_at=ACQUIRED, retired_at=ACQUIRED.replace(day=4)
        )

        applied = await apply_award_bonus(store, COMMISSIONER, 10, "bestPicture", 501, "nom")

        assert store.bonuses[applied.bonus_id].studio_id == 200

    @pytest.mark.asyncio
    async def test_unowned_movie(self, store: FakeStore) -> None:
        with pytest.raises(NotFoundError):
            await apply_award_bonus(store, COMMISSIONER, 10, "bestPicture", 501, "win")

    @pytest.mark.asyncio
    async def test_invalid_result(self, store: FakeStore) -> None:
        store.add_ownership(studio_id=100, movie_id=501, acquired_at=ACQUIRED)

        with pytest.raises(BadRequestError) as exc_info:
            await apply_award_bonus(store, COMMISSIONER, 10, "bestPicture", 501, "shortlist")

        assert exc_info.value.fields == [{"field": "result", "message": "must be one of: nom, win"}]

    @pytest.mark.asyncio
    async def test_disabled_category(self, store: FakeStore) -> None:
        store.add_ownership(studio_id=100, movie_id=501, acquired_at=ACQUIRED)

        with pytest.raises(BadRequestError):
            await apply_award_bonus(store, COMMISSIONER, 10, "bestScore", 501, "win")

    @pytest.mark.asyncio
    async def test_players_cannot_apply(self, store: FakeStore) -> None:
        store.add_ownership(studio_id=100, movie_id=501, acquired_at=ACQUIRED)

        with pytest.raises(ForbiddenError):
            await apply_award_bonus(store, PLAYER_A, 10, "bestPicture", 501, "win")


class TestBonusLedger:
    """Tests for listing and deleting bonuses."""

    @pytest.mark.asyncio
    async def test_list_and_delete(self, store: FakeStore) -> None:
        store.add_ownership(studio_id=100, movie_id=501, acquired_at=ACQUIRED)
        applied = await apply_award_bonus(store, COMMISSIONER, 10, "bestPicture", 501, "win")

        listed = await list_award_bonuses(store, PLAYER_A, 10)
        assert [bonus.id for bonus in listed] == [applied.bonus_id]

        await delete_award_bonus(store, COMMISSIONER, applied.bonus_id)
        assert await list_award_bonuses(store, PLAYER_A, 10) == []

    @pytest.mark.asyncio
    async def test_delete_missing(self, store: FakeStore) -> None:
        with pytest.raises(NotFoundError):
            await delete_award_bonus(store, COMMISSIONER, 31337)

    @pytest.mark.asyncio
    async def test_players_cannot_delete(self, store: FakeStore) -> None:
        store.add_ownership(studio_id=100, movie_id=501, acquired_at=ACQUIRED)
        applied = await apply_award_bonus(store, COMMISSIONER, 10, "bestPicture", 501, "win")

        with pytest.raises(ForbiddenError):
            await delete_award_bonus(store, PLAYER_A, applied.bonus_id)
