"""Per-request ScoringStore bound to the request's database session."""

from __future__ import annotations

from fastapi import Depends

from ..db import AsyncSession, get_db
from ..services.store import ScoringStore


async def get_store(session: AsyncSession = Depends(get_db)) -> ScoringStore:
    return ScoringStore(session)
