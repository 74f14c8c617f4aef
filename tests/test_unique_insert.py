"""Tests for the bounded unique-insert loop."""

from __future__ import annotations

import pytest

from box_office_league.errors import ConflictError
from box_office_league.services.store import DuplicateKeyError
from box_office_league.services.unique_insert import insert_unique, next_suffixed_key


class TestNextSuffixedKey:
    """Tests for suffix derivation."""

    @pytest.mark.parametrize(
        ("candidate", "expected"),
        [
            ("summer-slate", "summer-slate-1"),
            ("summer-slate-1", "summer-slate-2"),
            ("summer-slate-9", "summer-slate-10"),
            ("2024", "2024-1"),
        ],
    )
    def test_increments(self, candidate: str, expected: str) -> None:
        assert next_suffixed_key(candidate) == expected


class _Recorder:
    def __init__(self, taken: set[str]) -> None:
        self.taken = taken
        self.attempts: list[str] = []

    async def __call__(self, key: str) -> str:
        self.attempts.append(key)
        if key in self.taken:
            raise DuplicateKeyError(key)
        self.taken.add(key)
        return key


class TestInsertUnique:
    """Tests for insert_unique."""

    @pytest.mark.asyncio
    async def test_first_attempt_succeeds(self) -> None:
        insert = _Recorder(set())

        assert await insert_unique(insert, "slate") == "slate"
        assert insert.attempts == ["slate"]

    @pytest.mark.asyncio
    async def test_fixed_key_collision_is_final(self) -> None:
        insert = _Recorder({"slate"})

        with pytest.raises(ConflictError, match="Already there"):
            await insert_unique(insert, "slate", conflict_message="Already there")

        assert insert.attempts == ["slate"]

    @pytest.mark.asyncio
    async def test_attempt_bound_ignored_without_next_candidate(self) -> None:
        insert = _Recorder({"slate"})

        with pytest.raises(ConflictError):
            await insert_unique(insert, "slate", max_attempts=5)

        assert insert.attempts == ["slate"]

    @pytest.mark.asyncio
    async def test_suffix_retry(self) -> None:
        insert = _Recorder({"slate", "slate-1"})

        result = await insert_unique(insert, "slate", next_candidate=next_suffixed_key)

        assert result == "slate-2"
        assert insert.attempts == ["slate", "slate-1", "slate-2"]

    @pytest.mark.asyncio
    async def test_exhaustion_fails_explicitly(self) -> None:
        insert = _Recorder({"slate", "slate-1", "slate-2"})

        with pytest.raises(ConflictError):
            await insert_unique(insert, "slate", next_candidate=next_suffixed_key, max_attempts=3)

        assert len(insert.attempts) == 3

    @pytest.mark.asyncio
    async def test_default_bound_from_settings(self) -> None:
        insert = _Recorder({"slate"} | {f"slate-{n}" for n in range(1, 20)})

        with pytest.raises(ConflictError):
            await insert_unique(insert, "slate", next_candidate=next_suffixed_key)

        assert len(insert.attempts) == 6

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self) -> None:
        async def broken(key: str) -> str:
            raise RuntimeError("connection reset")

        with pytest.raises(RuntimeError, match="connection reset"):
            await insert_unique(broken, "slate", next_candidate=next_suffixed_key)
