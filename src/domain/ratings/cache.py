"""Pass-scoped read-through cache of working rating snapshots."""

from __future__ import annotations

from collections.abc import Iterator, Mapping

from domain.common import MatchRecord, RatingSnapshot
from domain.protocol import LedgerStore
from domain.ratings.calculator import RatingParameters


def base_snapshot(
    user_id: str,
    *,
    match_id: str,
    timestamp: int,
    params: RatingParameters,
) -> RatingSnapshot:
    """Starting snapshot for a user with no ledger history."""
    return RatingSnapshot(
        user_id=user_id,
        match_id=match_id,
        rating=params.base_rating,
        timestamp=timestamp,
        provisional=True,
    )


class UserRatingCache(Mapping[str, RatingSnapshot]):
    """Working snapshots for every user touched by one recalculation pass.

    Each user is hydrated from the ledger at most once; later lookups return
    the same in-memory object so that matches later in the pass see the
    uncommitted changes from earlier ones.
    """

    def __init__(self, ledger: LedgerStore, params: RatingParameters) -> None:
        self.ledger = ledger
        self.params = params
        self._snapshots: dict[str, RatingSnapshot] = {}

    def get_snapshot(self, user_id: str, *, match_id: str, as_of: int) -> RatingSnapshot:
        snapshot = self._snapshots.get(user_id)
        if snapshot is None:
            snapshot = self.ledger.latest_before(user_id, as_of)
            if snapshot is None:
                snapshot = base_snapshot(
                    user_id,
                    match_id=match_id,
                    timestamp=as_of,
                    params=self.params,
                )
            self._snapshots[user_id] = snapshot
        return snapshot

    def hydrate(self, match: MatchRecord) -> list[RatingSnapshot]:
        """Ensure every participant of ``match`` is loaded."""
        if match.completed_at is None:
            raise ValueError(f"match_id={match.match_id} has no completed_at")
        return [
            self.get_snapshot(user_id, match_id=match.match_id, as_of=match.completed_at)
            for user_id in match.user_ids
        ]

    def __getitem__(self, user_id: str) -> RatingSnapshot:
        return self._snapshots[user_id]

    def __len__(self) -> int:
        return len(self._snapshots)

    def __iter__(self) -> Iterator[str]:
        return iter(self._snapshots)


__all__ = ["UserRatingCache", "base_snapshot"]
