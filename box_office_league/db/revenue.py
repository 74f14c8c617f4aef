"""Weekly revenue facts and the derived per-week scoring snapshots."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import text

from .base import Base


class MovieWeeklyRevenue(Base):
    """Box-office gross for one movie over one week.

    Populated by the external ingestion job; read-only for scoring.
    """

    __tablename__ = "movie_weekly_revenue"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    movie_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    week_start: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    week_end: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    domestic_gross: Mapped[int] = mapped_column(BigInteger, server_default="0", nullable=False)
    worldwide_gross: Mapped[int] = mapped_column(BigInteger, server_default="0", nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("movie_id", "week_start", name="uq_movie_weekly_revenue_movie_week"),
        CheckConstraint("week_end > week_start", name="ck_movie_weekly_revenue_window"),
    )


class StudioWeeklyRevenue(Base):
    """Per-studio revenue totals for one scoring week (derived, overwritten on recompute)."""

    __tablename__ = "studio_weekly_revenue"

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
    week_index: Mapped[int] = mapped_column(Integer, nullable=False)
    week_start: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    week_end: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    total_domestic_gross: Mapped[int] = mapped_column(
        BigInteger, server_default="0", nullable=False
    )
    total_worldwide_gross: Mapped[int] = mapped_column(
        BigInteger, server_default="0", nullable=False
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

    __table_args__ = (
        UniqueConstraint(
            "season_id", "week_index", "studio_id", name="uq_studio_weekly_revenue_key"
        ),
        Index("idx_studio_weekly_revenue_season_week", "season_id", "week_index"),
    )


class WeeklyRanking(Base):
    """Ranked points table for one scoring week (derived, replaced on recompute).

    ``rows`` is an ordered list of ``{studioId, rank, points, revenue}``.
    """

    __tablename__ = "weekly_rankings"

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
    week_index: Mapped[int] = mapped_column(Integer, nullable=False)
    rows: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONB, server_default=text("'[]'::jsonb"), nullable=False
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

    __table_args__ = (
        UniqueConstraint("season_id", "week_index", name="uq_weekly_ranking_season_week"),
        CheckConstraint("week_index >= 0", name="ck_weekly_ranking_week_index"),
    )
