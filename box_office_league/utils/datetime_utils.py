"""Datetime helpers for the API layer.

TIMEZONE CONVENTION:
Scoring weeks and the acquisition blackout are evaluated in the league's
own timezone (IANA name stored on the league). A season that "starts on
Jan 2" starts at local midnight Jan 2 for that league.

All datetime fields persisted and returned by the API are timezone-aware;
responses serialize them as ISO 8601.
"""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..config import settings


def now_utc() -> datetime:
    """Get the current time in UTC, timezone-aware."""
    return datetime.now(timezone.utc)


def resolve_zone(name: str | None) -> ZoneInfo:
    """Return the ZoneInfo for an IANA name, falling back to DEFAULT_LEAGUE_TIMEZONE.

    Raises:
        ValueError: If a non-empty name is not a known IANA timezone.
    """
    if not name:
        return ZoneInfo(settings.default_league_timezone)
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown timezone: {name}") from exc


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_local(value: datetime, zone_name: str | None) -> datetime:
    """Convert a datetime into the given league timezone."""
    return ensure_aware(value).astimezone(resolve_zone(zone_name))
