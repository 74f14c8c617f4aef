"""Initial scoring schema.

Leagues, seasons, studios and membership; the movie ownership ledger;
weekly revenue facts; the derived weekly snapshots; and award bonuses.

Revision ID: 20260301_000001
Revises:
Create Date: 2026-03-01
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "20260301_000001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps(with_updated: bool = True) -> list[sa.Column]:
    columns = [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        )
    ]
    if with_updated:
        columns.append(
            sa.Column(
                "updated_at",
                sa.DateTime(timezone=True),
                server_default=sa.func.now(),
                nullable=False,
            )
        )
    return columns


def _fk(name: str, table: str) -> sa.Column:
    return sa.Column(
        name,
        sa.Integer(),
        sa.ForeignKey(f"{table}.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


def upgrade() -> None:
    op.create_table(
        "leagues",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("owner_user_id", sa.String(length=64), nullable=False, index=True),
        sa.Column(
            "commissioner_user_ids",
            postgresql.JSONB(),
            server_default=sa.text("'[]'::jsonb"),
            nullable=False,
        ),
        sa.Column(
            "timezone", sa.String(length=64), server_default="America/New_York", nullable=False
        ),
        sa.Column("budget_cap", sa.Integer(), server_default="100", nullable=False),
        sa.Column("points_scheme", sa.String(length=20), server_default="optionB", nullable=False),
        sa.Column("custom_point_table", postgresql.JSONB(), nullable=True),
        sa.Column(
            "ranking_basis", sa.String(length=20), server_default="worldwide", nullable=False
        ),
        sa.Column("week_anchor_weekday", sa.Integer(), nullable=True),
        sa.Column(
            "award_categories",
            postgresql.JSONB(),
            server_default=sa.text("'[]'::jsonb"),
            nullable=False,
        ),
        *_timestamps(),
        sa.CheckConstraint(
            "week_anchor_weekday BETWEEN 0 AND 6", name="ck_leagues_week_anchor_weekday"
        ),
    )

    op.create_table(
        "seasons",
        sa.Column("id", sa.Integer(), primary_key=True),
        _fk("league_id", "leagues"),
        sa.Column("label", sa.String(length=50), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("week_count", sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index(
        "idx_seasons_league_label_lower",
        "seasons",
        ["league_id", sa.text("lower(label)")],
        unique=True,
    )

    op.create_table(
        "studios",
        sa.Column("id", sa.Integer(), primary_key=True),
        _fk("league_id", "leagues"),
        sa.Column("name", sa.String(length=100), nullable=False),
        *_timestamps(),
    )
    op.create_index(
        "idx_studios_league_name_lower",
        "studios",
        ["league_id", sa.text("lower(name)")],
        unique=True,
    )

    op.create_table(
        "studio_members",
        sa.Column("id", sa.Integer(), primary_key=True),
        _fk("league_id", "leagues"),
        _fk("studio_id", "studios"),
        sa.Column("user_id", sa.String(length=64), nullable=False, index=True),
        sa.Column("role", sa.String(length=20), server_default="owner", nullable=False),
        *_timestamps(with_updated=False),
        sa.UniqueConstraint("league_id", "user_id", name="uq_studio_member_league_user"),
        sa.UniqueConstraint("studio_id", "user_id", name="uq_studio_member_studio_user"),
    )

    op.create_table(
        "movie_ownerships",
        sa.Column("id", sa.Integer(), primary_key=True),
        _fk("league_id", "leagues"),
        _fk("season_id", "seasons"),
        _fk("studio_id", "studios"),
        sa.Column("movie_id", sa.Integer(), nullable=False, index=True),
        sa.Column("purchase_price", sa.BigInteger(), nullable=False),
        sa.Column("acquired_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("retired_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("refund_applied", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("season_id", "movie_id", name="uq_movie_ownership_season_movie"),
    )
    op.create_index(
        "idx_movie_ownerships_league_season_studio",
        "movie_ownerships",
        ["league_id", "season_id", "studio_id"],
    )
    op.create_index(
        "idx_movie_ownerships_studio_movie", "movie_ownerships", ["studio_id", "movie_id"]
    )

    op.create_table(
        "movie_weekly_revenue",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("movie_id", sa.Integer(), nullable=False, index=True),
        sa.Column("week_start", sa.DateTime(timezone=True), nullable=False, index=True),
        sa.Column("week_end", sa.DateTime(timezone=True), nullable=False, index=True),
        sa.Column("domestic_gross", sa.BigInteger(), server_default="0", nullable=False),
        sa.Column("worldwide_gross", sa.BigInteger(), server_default="0", nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("movie_id", "week_start", name="uq_movie_weekly_revenue_movie_week"),
        sa.CheckConstraint("week_end > week_start", name="ck_movie_weekly_revenue_window"),
    )

    op.create_table(
        "studio_weekly_revenue",
        sa.Column("id", sa.Integer(), primary_key=True),
        _fk("league_id", "leagues"),
        _fk("season_id", "seasons"),
        _fk("studio_id", "studios"),
        sa.Column("week_index", sa.Integer(), nullable=False),
        sa.Column("week_start", sa.DateTime(timezone=True), nullable=False),
        sa.Column("week_end", sa.DateTime(timezone=True), nullable=False),
        sa.Column("total_domestic_gross", sa.BigInteger(), server_default="0", nullable=False),
        sa.Column("total_worldwide_gross", sa.BigInteger(), server_default="0", nullable=False),
        *_timestamps(),
        sa.UniqueConstraint(
            "season_id", "week_index", "studio_id", name="uq_studio_weekly_revenue_key"
        ),
    )
    op.create_index(
        "idx_studio_weekly_revenue_season_week",
        "studio_weekly_revenue",
        ["season_id", "week_index"],
    )

    op.create_table(
        "weekly_rankings",
        sa.Column("id", sa.Integer(), primary_key=True),
        _fk("league_id", "leagues"),
        _fk("season_id", "seasons"),
        sa.Column("week_index", sa.Integer(), nullable=False),
        sa.Column(
            "rows", postgresql.JSONB(), server_default=sa.text("'[]'::jsonb"), nullable=False
        ),
        *_timestamps(),
        sa.UniqueConstraint("season_id", "week_index", name="uq_weekly_ranking_season_week"),
        sa.CheckConstraint("week_index >= 0", name="ck_weekly_ranking_week_index"),
    )

    op.create_table(
        "award_bonuses",
        sa.Column("id", sa.Integer(), primary_key=True),
        _fk("league_id", "leagues"),
        _fk("season_id", "seasons"),
        _fk("studio_id", "studios"),
        sa.Column("movie_id", sa.Integer(), nullable=False, index=True),
        sa.Column("category_key", sa.String(length=64), nullable=False),
        sa.Column("result", sa.String(length=8), nullable=False),
        sa.Column("points", sa.Float(), nullable=False),
        sa.Column(
            "awarded_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        *_timestamps(with_updated=False),
        sa.UniqueConstraint(
            "season_id",
            "studio_id",
            "movie_id",
            "category_key",
            "result",
            name="uq_award_bonus_tuple",
        ),
    )
    op.create_index(
        "idx_award_bonuses_season_awarded", "award_bonuses", ["season_id", "awarded_at"]
    )


def downgrade() -> None:
    op.drop_table("award_bonuses")
    op.drop_table("weekly_rankings")
    op.drop_table("studio_weekly_revenue")
    op.drop_table("movie_weekly_revenue")
    op.drop_table("movie_ownerships")
    op.drop_table("studio_members")
    op.drop_table("studios")
    op.drop_table("seasons")
    op.drop_table("leagues")
