"""Persistence helpers for the per-(user, match) rating ledger."""

from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from domain.common import RatingSnapshot
from models import RatingHistory

_SNAPSHOT_FIELDS = (
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
    "timestamp",
)


def _to_snapshot(row: RatingHistory) -> RatingSnapshot:
    return RatingSnapshot(
        user_id=row.user_id,
        match_id=row.match_id,
        **{field: getattr(row, field) for field in _SNAPSHOT_FIELDS},
    )


def upsert_rating_history(session: Session, snapshot: RatingSnapshot) -> None:
    """Insert or overwrite the ledger entry for (snapshot.user_id, snapshot.match_id)."""
    session.merge(
        RatingHistory(
            user_id=snapshot.user_id,
            match_id=snapshot.match_id,
            **{field: getattr(snapshot, field) for field in _SNAPSHOT_FIELDS},
        )
    )


class SqlLedgerStore:
    """Ledger lookups and per-match deletion."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def latest_before(self, user_id: str, timestamp: int) -> RatingSnapshot | None:
        statement = (
            select(RatingHistory)
            .where(
                RatingHistory.user_id == user_id,
                RatingHistory.timestamp < timestamp,
            )
            .order_by(RatingHistory.timestamp.desc(), RatingHistory.match_id.desc())
            .limit(1)
            # Rows may have been rewritten by the batch writer since they were loaded.
            .execution_options(populate_existing=True)
        )
        row = self.session.execute(statement).scalar_one_or_none()
        return None if row is None else _to_snapshot(row)

    def highest_non_provisional(self, user_id: str) -> float | None:
        statement = select(func.max(RatingHistory.rating)).where(
            RatingHistory.user_id == user_id,
            RatingHistory.provisional.is_(False),
        )
        result = self.session.scalar(statement)
        return None if result is None else float(result)

    def history(self, user_id: str) -> list[RatingSnapshot]:
        """Full ledger for one user, oldest first."""
        statement = (
            select(RatingHistory)
            .where(RatingHistory.user_id == user_id)
            .order_by(RatingHistory.timestamp, RatingHistory.match_id)
            .execution_options(populate_existing=True)
        )
        return [_to_snapshot(row) for row in self.session.execute(statement).scalars()]

    def delete_for_match(self, match_id: str) -> int:
        """Delete all entries for one match in a single transaction."""
        try:
            result = self.session.execute(
                delete(RatingHistory).where(RatingHistory.match_id == match_id)
            )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return int(result.rowcount or 0)


__all__ = ["SqlLedgerStore", "upsert_rating_history"]
