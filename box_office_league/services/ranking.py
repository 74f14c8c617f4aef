"""
Weekly ranking engine.

Converts per-studio totals into an ordered, points-assigned table.

Tie handling:
Studios with exactly equal ranking revenue share the lowest rank of their
tied block, and each receives the mean of point_for(r) over every rank
position the block spans. Revenues [100, 100, 50] rank as [1, 1, 3]; both
leaders receive (point_for(1) + point_for(2)) / 2.

Points schemes:
- optionB: fixed table [10, 8, 6, 5, 4, 3, 2, 1], ranks past the end score 0
- custom:  league-supplied rank -> points map, missing ranks score 0
- linear:  point_for(rank) = 2N - 2(rank - 1) for N ranked studios
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from ..db.league import PointsScheme, RankingBasis
from .scoring_types import StudioId, StudioTotals

logger = logging.getLogger(__name__)

DEFAULT_POINTS_TABLE: tuple[float, ...] = (10, 8, 6, 5, 4, 3, 2, 1)


@dataclass(frozen=True)
class PointsPolicy:
    """How ranks translate into points, built from an explicit league config."""

    scheme: PointsScheme = PointsScheme.option_b
    table: tuple[float, ...] = DEFAULT_POINTS_TABLE
    custom_table: Mapping[int, float] = field(default_factory=dict)
    basis: RankingBasis = RankingBasis.worldwide

    @classmethod
    def from_league(cls, league: Any) -> "PointsPolicy":
        scheme = PointsScheme(getattr(league, "points_scheme", None) or PointsScheme.option_b.value)
        basis = RankingBasis(getattr(league, "ranking_basis", None) or RankingBasis.worldwide.value)
        raw_custom = getattr(league, "custom_point_table", None) or {}
        custom_table = {int(rank): float(points) for rank, points in raw_custom.items()}
        if scheme is PointsScheme.custom and not custom_table:
            # A custom scheme without a table scores like the default table.
            scheme = PointsScheme.option_b
        return cls(scheme=scheme, custom_table=custom_table, basis=basis)

    def ranking_figure(self, totals: StudioTotals) -> int:
        if self.basis is RankingBasis.domestic:
            return totals.domestic
        return totals.worldwide

    def point_for(self, rank: int, field_size: int) -> float:
        """Points for a single rank position among field_size ranked studios."""
        if rank < 1:
            raise ValueError("rank must be >= 1")
        if self.scheme is PointsScheme.linear:
            return float(2 * field_size - 2 * (rank - 1))
        if self.scheme is PointsScheme.custom:
            return float(self.custom_table.get(rank, 0))
        if rank <= len(self.table):
            return float(self.table[rank - 1])
        return 0.0


@dataclass(frozen=True)
class RankingRow:
    studio_id: StudioId
    rank: int
    points: float
    revenue: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "studioId": int(self.studio_id),
            "rank": self.rank,
            "points": self.points,
            "revenue": self.revenue,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "RankingRow":
        return cls(
            studio_id=StudioId(int(payload["studioId"])),
            rank=int(payload["rank"]),
            points=float(payload["points"]),
            revenue=int(payload["revenue"]),
        )


def rank_studios(
    totals: Mapping[StudioId, StudioTotals],
    policy: PointsPolicy | None = None,
) -> list[RankingRow]:
    """Rank studios by the policy's revenue figure with tie-aware points."""
    policy = policy or PointsPolicy()
    ordered = sorted(
        ((studio_id, policy.ranking_figure(studio_totals)) for studio_id, studio_totals in totals.items()),
        key=lambda item: (-item[1], item[0]),
    )
    field_size = len(ordered)

    rows: list[RankingRow] = []
    block_start = 0
    while block_start < field_size:
        revenue = ordered[block_start][1]
        block_end = block_start
        while block_end < field_size and ordered[block_end][1] == revenue:
            block_end += 1

        rank = block_start + 1
        span = block_end - block_start
        points = sum(policy.point_for(rank + offset, field_size) for offset in range(span)) / span
        for studio_id, studio_revenue in ordered[block_start:block_end]:
            rows.append(
                RankingRow(studio_id=studio_id, rank=rank, points=points, revenue=studio_revenue)
            )
        block_start = block_end

    logger.debug(
        "Ranked studios",
        extra={
            "studios": field_size,
            "scheme": policy.scheme.value,
            "basis": policy.basis.value,
        },
    )
    return rows
