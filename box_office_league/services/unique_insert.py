"""Bounded optimistic insert loop for rows guarded by a unique constraint.

Compute a candidate key, attempt the insert, and on a uniqueness collision
either derive the next candidate (for example a numeric suffix) and retry,
or fail immediately when the key has no alternatives. The loop never runs
more than a fixed number of attempts and always ends in a result or an
explicit ConflictError.

Ownership and award inserts pass no ``next_candidate``: their natural keys
have no alternatives, so one attempt is made and a collision is final.
``next_suffixed_key`` and ``UNIQUE_INSERT_MAX_ATTEMPTS`` only come into play
for name-like keys such as slugs, where ``name-1``, ``name-2`` are valid
fallbacks.
"""

from __future__ import annotations

import logging
import re
from typing import Awaitable, Callable, TypeVar

from tenacity import AsyncRetrying, RetryError, retry_if_exception_type, stop_after_attempt

from ..config import settings
from ..errors import ConflictError
from .store import DuplicateKeyError

logger = logging.getLogger(__name__)

K = TypeVar("K")
T = TypeVar("T")

_SUFFIX_PATTERN = re.compile(r"^(?P<base>.*?)-(?P<n>\d+)$")


def next_suffixed_key(candidate: str) -> str:
    """``name`` -> ``name-1`` -> ``name-2`` ..."""
    match = _SUFFIX_PATTERN.match(candidate)
    if match:
        return f"{match.group('base')}-{int(match.group('n')) + 1}"
    return f"{candidate}-1"


async def insert_unique(
    insert: Callable[[K], Awaitable[T]],
    candidate: K,
    *,
    next_candidate: Callable[[K], K] | None = None,
    max_attempts: int | None = None,
    conflict_message: str = "Record already exists",
) -> T:
    """Insert with the candidate key, retrying on uniqueness collisions.

    Args:
        insert: Coroutine performing the insert for a key; raises
            DuplicateKeyError on a unique violation.
        candidate: First key to try.
        next_candidate: Derives the next key after a collision. Without it
            the first collision is final.
        max_attempts: Upper bound on attempts (defaults to
            UNIQUE_INSERT_MAX_ATTEMPTS).
        conflict_message: Message of the ConflictError raised on exhaustion.

    Raises:
        ConflictError: If every attempt collided.
    """
    attempts = 1 if next_candidate is None else (max_attempts or settings.unique_insert_max_attempts)
    current = candidate

    try:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(attempts),
            retry=retry_if_exception_type(DuplicateKeyError),
            reraise=False,
        ):
            with attempt:
                if attempt.retry_state.attempt_number > 1 and next_candidate is not None:
                    current = next_candidate(current)
                return await insert(current)
    except RetryError as exc:
        logger.info(
            "Unique insert exhausted attempts",
            extra={"attempts": attempts, "last_candidate": str(current)},
        )
        raise ConflictError(conflict_message) from exc.last_attempt.exception()

    raise ConflictError(conflict_message)
