"""Collaborator contracts and write operations for the recalculation engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from domain.common import MatchRecord, RatingSnapshot


@dataclass(frozen=True)
class UpsertLedgerEntry:
    """Write one ledger entry keyed by (snapshot.user_id, snapshot.match_id)."""

    snapshot: RatingSnapshot


@dataclass(frozen=True)
class UpdateProfile:
    """Overwrite the rating-bearing stat fields of one user profile."""

    user_id: str
    fields: dict[str, Any]


@dataclass(frozen=True)
class SetMatchUserIds:
    """Keep a match's flattened roster column in sync."""

    match_id: str
    user_ids: tuple[str, ...]


WriteOp = UpsertLedgerEntry | UpdateProfile | SetMatchUserIds


@runtime_checkable
class MatchSource(Protocol):
    """Completed matches ordered ascending by completion time."""

    def fetch_completed_since(self, lower_bound: int, *, limit: int) -> list[MatchRecord]: ...


@runtime_checkable
class LedgerStore(Protocol):
    """Read/delete access to the per-(user, match) rating ledger."""

    def latest_before(self, user_id: str, timestamp: int) -> RatingSnapshot | None: ...

    def highest_non_provisional(self, user_id: str) -> float | None: ...

    def delete_for_match(self, match_id: str) -> int: ...


@runtime_checkable
class ProfileStore(Protocol):
    """Keyed partial update of user profile stats."""

    def update_stats(self, user_id: str, fields: dict[str, Any]) -> None: ...


@runtime_checkable
class CursorStore(Protocol):
    """Single durable watermark record."""

    def get(self) -> int | None: ...

    def replace(self, timestamp: int) -> None: ...

    def clear(self) -> None: ...


@runtime_checkable
class BatchWriter(Protocol):
    """Ordered write queue committed in provider-sized chunks.

    ``commit`` applies operations in enqueue order and returns the number of
    committed writes; a failure after earlier chunks landed is reported as
    ``PartialCommitError``.
    """

    @property
    def pending(self) -> int: ...

    def enqueue(self, op: WriteOp) -> None: ...

    def commit(self) -> int: ...


__all__ = [
    "BatchWriter",
    "CursorStore",
    "LedgerStore",
    "MatchSource",
    "ProfileStore",
    "SetMatchUserIds",
    "UpdateProfile",
    "UpsertLedgerEntry",
    "WriteOp",
]
