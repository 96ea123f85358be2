"""Rating computation modules."""

from domain.ratings.accumulator import apply_match_outcome, validate_match
from domain.ratings.cache import UserRatingCache, base_snapshot
from domain.ratings.calculator import (
    RatingParameters,
    calculate_expected_score,
    compute_delta,
    delta_with_provisional,
    team_rating,
)
from domain.ratings.queries import highest_rating, latest_before, purge_match_history

__all__ = [
    "RatingParameters",
    "UserRatingCache",
    "apply_match_outcome",
    "base_snapshot",
    "calculate_expected_score",
    "compute_delta",
    "delta_with_provisional",
    "highest_rating",
    "latest_before",
    "purge_match_history",
    "team_rating",
    "validate_match",
]
