"""League configuration, seasons, studios and studio membership."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import text

from .base import Base


class PointsScheme(str, Enum):
    """How a weekly rank converts into points."""

    option_b = "optionB"  # fixed table [10, 8, 6, 5, 4, 3, 2, 1]
    custom = "custom"     # league-provided rank -> points map
    linear = "linear"     # 2N - 2(rank - 1)


class RankingBasis(str, Enum):
    """Which gross figure orders the weekly ranking."""

    worldwide = "worldwide"
    domestic = "domestic"


class StudioRole(str, Enum):
    owner = "owner"
    manager = "manager"


class League(Base):
    """A competition among studios; owns the scoring and award configuration."""

    __tablename__ = "leagues"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    owner_user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    commissioner_user_ids: Mapped[list[str]] = mapped_column(
        JSONB, server_default=text("'[]'::jsonb"), nullable=False
    )
    timezone: Mapped[str] = mapped_column(
        String(64), server_default="America/New_York", nullable=False
    )
    budget_cap: Mapped[int] = mapped_column(Integer, server_default="100", nullable=False)
    points_scheme: Mapped[str] = mapped_column(
        String(20), server_default=PointsScheme.option_b.value, nullable=False
    )
    custom_point_table: Mapped[dict[str, float] | None] = mapped_column(JSONB, nullable=True)
    ranking_basis: Mapped[str] = mapped_column(
        String(20), server_default=RankingBasis.worldwide.value, nullable=False
    )
    # 0=Monday .. 6=Sunday; NULL keeps weeks aligned to the season start day.
    week_anchor_weekday: Mapped[int | None] = mapped_column(Integer, nullable=True)
    award_categories: Mapped[list[dict[str, Any]]] = mapped_column(
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

    seasons: Mapped[list["Season"]] = relationship(
        "Season", back_populates="league", cascade="all, delete-orphan"
    )
    studios: Mapped[list["Studio"]] = relationship(
        "Studio", back_populates="league", cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint(
            "week_anchor_weekday BETWEEN 0 AND 6", name="ck_leagues_week_anchor_weekday"
        ),
    )


class Season(Base):
    """A time-boxed run within a league, divided into 7-day scoring weeks."""

    __tablename__ = "seasons"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    league_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("leagues.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    label: Mapped[str] = mapped_column(String(50), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    week_count: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    league: Mapped[League] = relationship("League", back_populates="seasons")

    __table_args__ = (
        Index("idx_seasons_league_label_lower", "league_id", text("lower(label)"), unique=True),
    )


class Studio(Base):
    """A user-controlled team that owns movies within a league."""

    __tablename__ = "studios"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    league_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("leagues.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    league: Mapped[League] = relationship("League", back_populates="studios")
    members: Mapped[list["StudioMember"]] = relationship(
        "StudioMember", back_populates="studio", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("idx_studios_league_name_lower", "league_id", text("lower(name)"), unique=True),
    )


class StudioMember(Base):
    """Links a user to the single studio they run within a league."""

    __tablename__ = "studio_members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    league_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("leagues.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    studio_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("studios.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    role: Mapped[str] = mapped_column(
        String(20), server_default=StudioRole.owner.value, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    studio: Mapped[Studio] = relationship("Studio", back_populates="members")

    __table_args__ = (
        UniqueConstraint("league_id", "user_id", name="uq_studio_member_league_user"),
        UniqueConstraint("studio_id", "user_id", name="uq_studio_member_studio_user"),
    )
