"""Rating recalculation domain modules."""

from domain.common import MatchRecord, MatchStatus, RatingSnapshot, Team
from domain.pipeline import (
    RecalcSummary,
    compensate_deleted_match,
    recalculate_ratings,
    run_until_caught_up,
)

__all__ = [
    "MatchRecord",
    "MatchStatus",
    "RatingSnapshot",
    "RecalcSummary",
    "Team",
    "compensate_deleted_match",
    "recalculate_ratings",
    "run_until_caught_up",
]
