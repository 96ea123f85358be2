"""Persistence helpers for user profile stats."""

from __future__ import annotations

from typing import Any

from sqlalchemy import update
from sqlalchemy.orm import Session

from domain.errors import MissingUserError
from models import User

PROFILE_STAT_FIELDS = frozenset(
    {
        "rating",
        "games_played",
        "games_won",
        "spymaster_games",
        "spymaster_wins",
        "spymaster_streak",
        "spymaster_best_streak",
        "assassins_as_spymaster",
        "current_streak",
        "best_streak",
        "provisional",
        "last_played",
    }
)


class SqlProfileStore:
    """Keyed partial updates of the engine-owned user columns."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def update_stats(self, user_id: str, fields: dict[str, Any]) -> None:
        unknown = sorted(set(fields) - PROFILE_STAT_FIELDS)
        if unknown:
            raise ValueError(f"Unsupported profile fields for user_id={user_id}: {unknown}")

        result = self.session.execute(update(User).where(User.id == user_id).values(**fields))
        if result.rowcount == 0:
            raise MissingUserError(user_id)


__all__ = ["PROFILE_STAT_FIELDS", "SqlProfileStore"]
