"""Team Elo delta logic with provisional-period scaling."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from math import ceil

from domain.common import RatingSnapshot


@dataclass(frozen=True)
class RatingParameters:
    base_rating: float = 1200.0
    k_factor: float = 32.0
    scale_factor: float = 400.0
    # 0 disables the provisional period.
    provisional_games: int = 0


def calculate_expected_score(rating: float, opponent_rating: float, scale_factor: float) -> float:
    """Compute the Elo expected score for one side."""
    return 1.0 / (1.0 + 10.0 ** ((opponent_rating - rating) / scale_factor))


def compute_delta(winner_rating: float, loser_rating: float, params: RatingParameters) -> float:
    """Points moved from the losing side to the winning side (never negative)."""
    expected = calculate_expected_score(
        rating=winner_rating,
        opponent_rating=loser_rating,
        scale_factor=params.scale_factor,
    )
    return params.k_factor * (1.0 - expected)


def provisional_multiplier(games_played: int, provisional_games: int) -> int:
    """Earlier games move the rating further; the multiplier decays to 1."""
    if provisional_games > 0 and games_played < provisional_games:
        return ceil((provisional_games - games_played) / 2)
    return 1


def delta_with_provisional(games_played: int, raw_delta: float, provisional_games: int) -> float:
    return raw_delta * provisional_multiplier(games_played, provisional_games)


def team_rating(snapshots: Iterable[RatingSnapshot]) -> float:
    """Arithmetic mean of the members' current ratings."""
    ratings = [snapshot.rating for snapshot in snapshots]
    if not ratings:
        raise ValueError("cannot rate an empty team")
    return sum(ratings) / float(len(ratings))


__all__ = [
    "RatingParameters",
    "calculate_expected_score",
    "compute_delta",
    "delta_with_provisional",
    "provisional_multiplier",
    "team_rating",
]
