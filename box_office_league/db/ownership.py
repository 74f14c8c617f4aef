"""Movie ownership ledger.

Key Rules:
1. At most one row ever exists per (season_id, movie_id), active or retired
2. Rows are created on acquisition and only mutated by retirement
3. Rows are never deleted; retired rows keep historical revenue attribution
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    BigInteger,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class MovieOwnership(Base):
    """Assignment of a movie to a studio for a season."""

    __tablename__ = "movie_ownerships"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    league_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("leagues.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    season_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("seasons.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    studio_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("studios.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    movie_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    purchase_price: Mapped[int] = mapped_column(BigInteger, nullable=False)
    acquired_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    retired_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    refund_applied: Mapped[bool] = mapped_column(
        Boolean, server_default="false", nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    @property
    def is_active(self) -> bool:
        return self.retired_at is None

    __table_args__ = (
        UniqueConstraint("season_id", "movie_id", name="uq_movie_ownership_season_movie"),
        Index("idx_movie_ownerships_league_season_studio", "league_id", "season_id", "studio_id"),
        Index("idx_movie_ownerships_studio_movie", "studio_id", "movie_id"),
    )
