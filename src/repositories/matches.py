"""Completed-match reads and roster sync for the ratings engine."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from domain.common import MatchRecord, MatchStatus, Team
from models import Match


def _to_match_record(row: Match) -> MatchRecord:
    return MatchRecord(
        match_id=row.id,
        blue_team=Team(user_ids=tuple(row.blue_user_ids or ()), spymaster=row.blue_spymaster),
        red_team=Team(user_ids=tuple(row.red_user_ids or ()), spymaster=row.red_spymaster),
        status=row.status,
        completed_at=row.completed_at,
        blue_agents=row.blue_agents,
        red_agents=row.red_agents,
    )


class SqlMatchSource:
    """Pages of finished matches ordered by completion time.

    ``exclude_match_id`` hides one match that is being deleted but whose row
    still exists.
    """

    def __init__(self, session: Session, *, exclude_match_id: str | None = None) -> None:
        self.session = session
        self.exclude_match_id = exclude_match_id

    def fetch_completed_since(self, lower_bound: int, *, limit: int) -> list[MatchRecord]:
        statement = select(Match).where(
            Match.completed_at.is_not(None),
            Match.completed_at >= lower_bound,
            Match.status != MatchStatus.IN_PROGRESS,
        )
        if self.exclude_match_id is not None:
            statement = statement.where(Match.id != self.exclude_match_id)
        statement = (
            statement.order_by(Match.completed_at, Match.id)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        rows = self.session.execute(statement).scalars().all()
        return [_to_match_record(row) for row in rows]


def fetch_match(session: Session, match_id: str) -> MatchRecord | None:
    row = session.get(Match, match_id)
    return None if row is None else _to_match_record(row)


def delete_match(session: Session, match_id: str) -> None:
    session.execute(delete(Match).where(Match.id == match_id))


def set_match_user_ids(session: Session, match_id: str, user_ids: Sequence[str]) -> None:
    """Write the flattened roster column."""
    session.execute(update(Match).where(Match.id == match_id).values(user_ids=list(user_ids)))


__all__ = ["SqlMatchSource", "delete_match", "fetch_match", "set_match_user_ids"]
