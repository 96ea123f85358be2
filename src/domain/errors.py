"""Error types raised by the rating recalculation engine."""

from __future__ import annotations


class RecalcError(Exception):
    """Base class for recalculation failures."""


class MissingUserError(RecalcError, LookupError):
    """A match roster references a user that has no profile record."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"user_id={user_id} has no profile record")
        self.user_id = user_id


class MatchNotFoundError(RecalcError, LookupError):
    """A match id given for deletion has no match record."""

    def __init__(self, match_id: str) -> None:
        super().__init__(f"match_id={match_id} has no match record")
        self.match_id = match_id


class PartialCommitError(RecalcError):
    """A batched commit failed after some of its chunks were already committed.

    Replaying the same timestamp range converges because ledger writes are
    keyed upserts.
    """

    def __init__(
        self,
        *,
        committed_chunks: int,
        total_chunks: int,
        committed_writes: int,
    ) -> None:
        super().__init__(
            f"batched commit failed after {committed_chunks}/{total_chunks} chunks "
            f"(committed_writes={committed_writes})"
        )
        self.committed_chunks = committed_chunks
        self.total_chunks = total_chunks
        self.committed_writes = committed_writes


__all__ = ["MatchNotFoundError", "MissingUserError", "PartialCommitError", "RecalcError"]
