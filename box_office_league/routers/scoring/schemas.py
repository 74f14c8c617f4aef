"""Pydantic schemas for scoring endpoints."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator


class WeekWindowResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    week_index: int = Field(..., alias="weekIndex")
    week_start: datetime = Field(..., alias="weekStart")
    week_end: datetime = Field(..., alias="weekEnd")
    timezone: str


class RankingRowResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    studio_id: int = Field(..., alias="studioId")
    rank: int
    points: float
    revenue: int


class ComputeWeekResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    window: WeekWindowResponse
    studios_updated: int = Field(..., alias="studiosUpdated")
    ranking: list[RankingRowResponse]


class StudioWeeklyRevenueResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    studio_id: int = Field(..., alias="studioId")
    season_id: int = Field(..., alias="seasonId")
    week_index: int = Field(..., alias="weekIndex")
    week_start: datetime = Field(..., alias="weekStart")
    week_end: datetime = Field(..., alias="weekEnd")
    total_domestic_gross: int = Field(..., alias="totalDomesticGross")
    total_worldwide_gross: int = Field(..., alias="totalWorldwideGross")


class WeeklyRankingResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    season_id: int = Field(..., alias="seasonId")
    week_index: int = Field(..., alias="weekIndex")
    rows: list[RankingRowResponse]
    updated_at: datetime | None = Field(None, alias="updatedAt")


class StudioStandingResponse(BaseModel):
    """Weekly and award points are reported separately; there is no combined total."""

    model_config = ConfigDict(populate_by_name=True)

    studio_id: int = Field(..., alias="studioId")
    weekly_points: float = Field(..., alias="weeklyPoints")
    award_points: float = Field(..., alias="awardPoints")
    weeks_ranked: int = Field(..., alias="weeksRanked")


class SeasonStandingsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    season_id: int = Field(..., alias="seasonId")
    standings: list[StudioStandingResponse]


class SeasonStartDateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start_date: date = Field(..., alias="startDate")


class SeasonResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    league_id: int = Field(..., alias="leagueId")
    label: str
    start_date: date = Field(..., alias="startDate")
    end_date: date = Field(..., alias="endDate")
    week_count: int = Field(..., alias="weekCount")


class AcquireMovieRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    league_id: int = Field(..., alias="leagueId")
    season_id: int = Field(..., alias="seasonId")
    studio_id: int = Field(..., alias="studioId")
    movie_id: int = Field(..., alias="movieId")
    purchase_price: int = Field(..., ge=0, alias="purchasePrice")
    acquired_at: datetime | None = Field(None, alias="acquiredAt")

    @model_validator(mode="after")
    def require_aware_acquired_at(self) -> "AcquireMovieRequest":
        if self.acquired_at is not None and self.acquired_at.tzinfo is None:
            raise ValueError("acquiredAt must include a timezone offset")
        return self


class OwnershipResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    league_id: int = Field(..., alias="leagueId")
    season_id: int = Field(..., alias="seasonId")
    studio_id: int = Field(..., alias="studioId")
    movie_id: int = Field(..., alias="movieId")
    purchase_price: int = Field(..., alias="purchasePrice")
    acquired_at: datetime = Field(..., alias="acquiredAt")
    retired_at: datetime | None = Field(None, alias="retiredAt")
    refund_applied: bool = Field(False, alias="refundApplied")


class ApplyAwardRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    category_key: str = Field(..., min_length=1, alias="categoryKey")
    movie_id: int = Field(..., alias="movieId")
    result: str


class ApplyAwardResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    points: float
    bonus_id: int = Field(..., alias="bonusId")


class AwardBonusResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    season_id: int = Field(..., alias="seasonId")
    studio_id: int = Field(..., alias="studioId")
    movie_id: int = Field(..., alias="movieId")
    category_key: str = Field(..., alias="categoryKey")
    result: str
    points: float
    awarded_at: datetime | None = Field(None, alias="awardedAt")
