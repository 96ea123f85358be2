"""Apply one completed match to the working snapshots of its participants."""

from __future__ import annotations

from collections.abc import Mapping

from domain.common import MatchRecord, MatchStatus, RatingSnapshot, Team
from domain.ratings.calculator import (
    RatingParameters,
    compute_delta,
    delta_with_provisional,
    team_rating,
)


def validate_match(match: MatchRecord) -> int:
    """Check a match can be rated; returns its completion timestamp."""
    if not match.status.is_terminal:
        raise ValueError(f"match_id={match.match_id} is not finished (status={match.status.value})")
    if match.completed_at is None:
        raise ValueError(f"match_id={match.match_id} has no completed_at")
    if not match.blue_team.user_ids or not match.red_team.user_ids:
        raise ValueError(f"match_id={match.match_id} is missing players for one or both teams")

    shared = set(match.blue_team.user_ids) & set(match.red_team.user_ids)
    if shared:
        raise ValueError(
            f"match_id={match.match_id} has users on both teams: {sorted(shared)}"
        )
    for team in (match.blue_team, match.red_team):
        if team.spymaster is not None and team.spymaster not in team.user_ids:
            raise ValueError(
                f"spymaster={team.spymaster} is not on their team roster for match_id={match.match_id}"
            )
    return match.completed_at


def winning_and_losing_teams(match: MatchRecord) -> tuple[Team, Team]:
    if match.status is MatchStatus.BLUE_WON:
        return match.blue_team, match.red_team
    return match.red_team, match.blue_team


def apply_match_outcome(
    match: MatchRecord,
    snapshots: Mapping[str, RatingSnapshot],
    params: RatingParameters,
) -> None:
    """Mutate every participant's snapshot in place.

    ``snapshots`` must already hold every participant (see
    ``UserRatingCache.hydrate``).
    """
    completed_at = validate_match(match)

    winning_team, losing_team = winning_and_losing_teams(match)
    winners = [snapshots[user_id] for user_id in winning_team.user_ids]
    losers = [snapshots[user_id] for user_id in losing_team.user_ids]

    raw_delta = compute_delta(team_rating(winners), team_rating(losers), params)

    for user in winners:
        user.rating += delta_with_provisional(user.games_played, raw_delta, params.provisional_games)
        user.games_played += 1
        user.games_won += 1
        user.current_streak += 1
        user.best_streak = max(user.best_streak, user.current_streak)
        _stamp(user, match_id=match.match_id, completed_at=completed_at, params=params)

        if winning_team.spymaster == user.user_id:
            user.spymaster_games += 1
            user.spymaster_wins += 1
            user.spymaster_streak += 1
            user.spymaster_best_streak = max(user.spymaster_best_streak, user.spymaster_streak)

    for user in losers:
        user.rating -= delta_with_provisional(user.games_played, raw_delta, params.provisional_games)
        user.games_played += 1
        user.current_streak = 0
        _stamp(user, match_id=match.match_id, completed_at=completed_at, params=params)

        if losing_team.spymaster == user.user_id:
            user.spymaster_games += 1
            user.spymaster_streak = 0
            if match.ended_on_assassin:
                user.assassins_as_spymaster += 1


def _stamp(
    user: RatingSnapshot,
    *,
    match_id: str,
    completed_at: int,
    params: RatingParameters,
) -> None:
    user.match_id = match_id
    user.timestamp = completed_at
    user.provisional = user.games_played < params.provisional_games


__all__ = ["apply_match_outcome", "validate_match", "winning_and_losing_teams"]
