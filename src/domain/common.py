"""Shared types for match results and rating snapshots."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class MatchStatus(str, Enum):
    """Lifecycle status of a match; only the *_WON values are terminal."""

    IN_PROGRESS = "in_progress"
    BLUE_WON = "blue_won"
    RED_WON = "red_won"

    @property
    def is_terminal(self) -> bool:
        return self is not MatchStatus.IN_PROGRESS


@dataclass(frozen=True)
class Team:
    """One side of a match: ordered roster plus the designated spymaster."""

    user_ids: tuple[str, ...]
    spymaster: str | None = None


@dataclass(frozen=True)
class MatchRecord:
    """Canonical completed-match payload consumed by the recalculation engine.

    ``completed_at`` is epoch milliseconds and is present iff the status is
    terminal. ``blue_agents``/``red_agents`` count each team's unrevealed
    agent tiles when the match ended.
    """

    match_id: str
    blue_team: Team
    red_team: Team
    status: MatchStatus
    completed_at: int | None = None
    blue_agents: int = 0
    red_agents: int = 0

    @property
    def user_ids(self) -> tuple[str, ...]:
        """Flattened roster, blue users first."""
        return self.blue_team.user_ids + self.red_team.user_ids

    @property
    def ended_on_assassin(self) -> bool:
        """True when neither team had revealed all of its agents."""
        return self.blue_agents > 0 and self.red_agents > 0


@dataclass
class RatingSnapshot:
    """Working rating/stat state of one user as of one match."""

    user_id: str
    match_id: str
    rating: float
    timestamp: int
    games_played: int = 0
    games_won: int = 0
    spymaster_games: int = 0
    spymaster_wins: int = 0
    spymaster_streak: int = 0
    spymaster_best_streak: int = 0
    assassins_as_spymaster: int = 0
    current_streak: int = 0
    best_streak: int = 0
    provisional: bool = True

    def profile_fields(self) -> dict[str, float | int | bool]:
        """Denormalized user-profile stat columns for this snapshot."""
        return {
            "rating": self.rating,
            "games_played": self.games_played,
            "games_won": self.games_won,
            "spymaster_games": self.spymaster_games,
            "spymaster_wins": self.spymaster_wins,
            "spymaster_streak": self.spymaster_streak,
            "spymaster_best_streak": self.spymaster_best_streak,
            "assassins_as_spymaster": self.assassins_as_spymaster,
            "current_streak": self.current_streak,
            "best_streak": self.best_streak,
            "provisional": self.provisional,
            "last_played": self.timestamp,
        }


__all__ = ["MatchRecord", "MatchStatus", "RatingSnapshot", "Team"]
