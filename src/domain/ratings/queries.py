"""Read-only ledger lookups and per-match history pruning."""

from __future__ import annotations

from domain.common import RatingSnapshot
from domain.protocol import LedgerStore
from domain.ratings.cache import base_snapshot
from domain.ratings.calculator import RatingParameters


def highest_rating(ledger: LedgerStore, user_id: str) -> float | None:
    """Peak rating over the user's non-provisional ledger entries."""
    return ledger.highest_non_provisional(user_id)


def latest_before(
    ledger: LedgerStore,
    user_id: str,
    timestamp: int,
    params: RatingParameters | None = None,
) -> RatingSnapshot:
    """Most recent snapshot strictly before ``timestamp``, or a base snapshot."""
    snapshot = ledger.latest_before(user_id, timestamp)
    if snapshot is not None:
        return snapshot
    return base_snapshot(
        user_id,
        match_id="",
        timestamp=timestamp,
        params=params or RatingParameters(),
    )


def purge_match_history(ledger: LedgerStore, match_id: str) -> int:
    """Delete every ledger entry produced by ``match_id``.

    Profiles are left as-is; a recalculation seeded with the deleted match
    must follow to re-derive them.
    """
    if not match_id:
        raise ValueError("match_id is required")
    return ledger.delete_for_match(match_id)


__all__ = ["highest_rating", "latest_before", "purge_match_history"]
