"""Join weekly movie revenue with the ownership ledger into per-studio totals."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from .scoring_types import MovieId, RevenueFact, StudioId, StudioTotals

logger = logging.getLogger(__name__)


def aggregate_studio_totals(
    revenue_rows: Iterable[RevenueFact],
    owner_by_movie: Mapping[MovieId, StudioId],
) -> dict[StudioId, StudioTotals]:
    """Accumulate domestic and worldwide gross per owning studio.

    Revenue for movies without an owner in the week is discarded.
    """
    totals: dict[StudioId, StudioTotals] = {}
    unowned = 0
    for row in revenue_rows:
        studio_id = owner_by_movie.get(MovieId(row.movie_id))
        if studio_id is None:
            unowned += 1
            continue
        totals.setdefault(studio_id, StudioTotals()).add(row)

    logger.debug(
        "Aggregated studio revenue",
        extra={"studios": len(totals), "unowned_rows": unowned},
    )
    return totals
