"""Award bonus ledger (independent of weekly revenue points)."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import (
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class AwardResult(str, Enum):
    nomination = "nom"
    win = "win"


class AwardBonus(Base):
    """Bonus points credited to the studio owning a nominated or winning movie."""

    __tablename__ = "award_bonuses"

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
    category_key: Mapped[str] = mapped_column(String(64), nullable=False)
    result: Mapped[str] = mapped_column(String(8), nullable=False)
    points: Mapped[float] = mapped_column(Float, nullable=False)
    awarded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint(
            "season_id",
            "studio_id",
            "movie_id",
            "category_key",
            "result",
            name="uq_award_bonus_tuple",
        ),
        Index("idx_award_bonuses_season_awarded", "season_id", "awarded_at"),
    )
