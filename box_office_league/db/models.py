"""Single import point that registers every mapped table on Base.metadata."""

from .awards import AwardBonus, AwardResult
from .base import Base
from .league import League, PointsScheme, RankingBasis, Season, Studio, StudioMember, StudioRole
from .ownership import MovieOwnership
from .revenue import MovieWeeklyRevenue, StudioWeeklyRevenue, WeeklyRanking

__all__ = [
    "AwardBonus",
    "AwardResult",
    "Base",
    "League",
    "MovieOwnership",
    "MovieWeeklyRevenue",
    "PointsScheme",
    "RankingBasis",
    "Season",
    "Studio",
    "StudioMember",
    "StudioRole",
    "StudioWeeklyRevenue",
    "WeeklyRanking",
]
