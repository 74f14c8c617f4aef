"""Tests for datetime_utils module."""

from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from box_office_league.utils.datetime_utils import (
    ensure_aware,
    now_utc,
    resolve_zone,
    to_local,
)


class TestNowUtc:
    """Tests for now_utc."""

    def test_is_timezone_aware(self):
        result = now_utc()
        assert result.tzinfo == UTC


class TestResolveZone:
    """Tests for resolve_zone."""

    def test_known_zone(self):
        assert resolve_zone("Europe/London") == ZoneInfo("Europe/London")

    @pytest.mark.parametrize("name", [None, ""])
    def test_empty_falls_back_to_default(self, name):
        assert resolve_zone(name) == ZoneInfo("America/New_York")

    def test_unknown_zone(self):
        with pytest.raises(ValueError, match="Unknown timezone"):
            resolve_zone("Nowhere/Special")


class TestConversions:
    """Tests for ensure_aware and to_local."""

    def test_naive_is_utc(self):
        assert ensure_aware(datetime(2024, 1, 1, 12)) == datetime(2024, 1, 1, 12, tzinfo=UTC)

    def test_aware_unchanged(self):
        value = datetime(2024, 1, 1, 12, tzinfo=ZoneInfo("Asia/Tokyo"))
        assert ensure_aware(value) is value

    def test_to_local(self):
        local = to_local(datetime(2024, 7, 1, 12, tzinfo=UTC), "America/New_York")
        assert local.hour == 8
        assert local.utcoffset() == timedelta(hours=-4)
