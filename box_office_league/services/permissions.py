"""Authorization decisions for league and studio operations.

One entry point, ``authorize``, answers whether an actor holds a capability
in a league. It is composed from named predicates instead of ad hoc checks
scattered through handlers, and returns a decision with a reason rather than
raising, so callers choose how to surface a denial.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from ..errors import ForbiddenError


class Capability(str, Enum):
    manage_league = "manage_league"   # compute weeks, apply/delete award bonuses
    view_league = "view_league"       # read snapshots, rankings, bonuses
    manage_studio = "manage_studio"   # acquire/retire for a specific studio


@dataclass(frozen=True)
class Actor:
    """The authenticated user on whose behalf an operation runs."""

    user_id: str


@dataclass(frozen=True)
class AuthContext:
    actor: Actor
    league: Any
    member_studio_ids: frozenset[int] = field(default_factory=frozenset)
    target_studio_id: int | None = None


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str | None = None


def is_owner(ctx: AuthContext) -> bool:
    return str(ctx.league.owner_user_id) == ctx.actor.user_id


def is_commissioner(ctx: AuthContext) -> bool:
    commissioners = ctx.league.commissioner_user_ids or []
    return any(str(user_id) == ctx.actor.user_id for user_id in commissioners)


def is_studio_member(ctx: AuthContext) -> bool:
    """Member of the target studio, or of any studio in the league when no target is set."""
    if ctx.target_studio_id is None:
        return bool(ctx.member_studio_ids)
    return ctx.target_studio_id in ctx.member_studio_ids


_RULES: dict[Capability, tuple[tuple[Callable[[AuthContext], bool], ...], str]] = {
    Capability.manage_league: (
        (is_owner, is_commissioner),
        "Only league owners or commissioners can perform this action",
    ),
    Capability.view_league: (
        (is_owner, is_commissioner, is_studio_member),
        "Access denied",
    ),
    Capability.manage_studio: (
        (is_studio_member,),
        "You do not have permission to manage this studio",
    ),
}


def authorize(capability: Capability, ctx: AuthContext) -> Decision:
    predicates, denial = _RULES[capability]
    if any(predicate(ctx) for predicate in predicates):
        return Decision(allowed=True)
    return Decision(allowed=False, reason=denial)


def require(capability: Capability, ctx: AuthContext) -> None:
    """Raise ForbiddenError unless the capability is granted."""
    decision = authorize(capability, ctx)
    if not decision.allowed:
        raise ForbiddenError(decision.reason or "Access denied")


async def load_auth_context(
    store: Any,
    actor: Actor,
    league: Any,
    target_studio_id: int | None = None,
) -> AuthContext:
    """Resolve the actor's studio memberships in a league."""
    studio_ids = await store.studio_ids_for_user(league.id, actor.user_id)
    return AuthContext(
        actor=actor,
        league=league,
        member_studio_ids=frozenset(studio_ids),
        target_studio_id=target_studio_id,
    )
