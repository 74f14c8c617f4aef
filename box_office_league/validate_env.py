"""Fail-fast environment validation, run once at API startup."""

from __future__ import annotations

import os
from functools import lru_cache
from urllib.parse import urlparse

from .utils.datetime_utils import resolve_zone

ALLOWED_ENVIRONMENTS = {"development", "staging", "production"}
_FALSY = {"0", "false", "no", "off"}


def _env(name: str) -> str:
    return (os.getenv(name) or "").strip()


def _check_required(problems: list[str], *names: str) -> None:
    for name in names:
        if not _env(name):
            problems.append(f"{name} is required and must be set before startup.")


def _check_timezone(problems: list[str]) -> None:
    zone = _env("DEFAULT_LEAGUE_TIMEZONE")
    if not zone:
        return
    try:
        resolve_zone(zone)
    except ValueError:
        problems.append(f"DEFAULT_LEAGUE_TIMEZONE is not a known IANA timezone: {zone}.")


def _check_production(problems: list[str]) -> None:
    _check_required(problems, "API_KEY", "ALLOWED_CORS_ORIGINS")

    database_url = urlparse(_env("DATABASE_URL"))
    if database_url.hostname in {None, "localhost", "127.0.0.1"}:
        problems.append("DATABASE_URL must point to a non-local database host in production.")
    if database_url.username == "postgres" and database_url.password == "postgres":
        problems.append("DATABASE_URL must not use default postgres credentials in production.")

    origins = _env("ALLOWED_CORS_ORIGINS")
    if "localhost" in origins or "127.0.0.1" in origins:
        problems.append("ALLOWED_CORS_ORIGINS must not include localhost in production.")

    if _env("ACQUISITION_WINDOW_ENFORCED").lower() in _FALSY:
        problems.append("ACQUISITION_WINDOW_ENFORCED cannot be disabled in production.")


@lru_cache(maxsize=1)
def validate_env() -> None:
    """Raise RuntimeError listing every configuration problem found."""
    problems: list[str] = []
    _check_required(problems, "ENVIRONMENT", "DATABASE_URL")

    environment = _env("ENVIRONMENT")
    if environment and environment not in ALLOWED_ENVIRONMENTS:
        allowed = ", ".join(sorted(ALLOWED_ENVIRONMENTS))
        problems.append(f"ENVIRONMENT must be one of: {allowed}.")

    _check_timezone(problems)
    if environment == "production":
        _check_production(problems)

    if problems:
        raise RuntimeError("Invalid environment:\n- " + "\n- ".join(problems))
