"""Ordered write queue committed in size-limited transactions."""

from __future__ import annotations

from collections.abc import Callable

from sqlalchemy.orm import Session, sessionmaker

from domain.errors import PartialCommitError
from domain.protocol import SetMatchUserIds, UpdateProfile, UpsertLedgerEntry, WriteOp
from repositories.matches import set_match_user_ids
from repositories.rating_history import upsert_rating_history
from repositories.users import SqlProfileStore

DEFAULT_MAX_WRITES_PER_COMMIT = 500


def _apply_op(session: Session, op: WriteOp) -> None:
    if isinstance(op, UpsertLedgerEntry):
        upsert_rating_history(session, op.snapshot)
    elif isinstance(op, UpdateProfile):
        SqlProfileStore(session).update_stats(op.user_id, op.fields)
    elif isinstance(op, SetMatchUserIds):
        set_match_user_ids(session, op.match_id, op.user_ids)
    else:
        raise TypeError(f"Unsupported write operation: {type(op)!r}")


class SqlBatchWriter:
    """Queue writes, then commit them in enqueue order.

    Each chunk of at most ``max_writes_per_commit`` operations is one
    transaction. Chunks run sequentially so writes to the same key keep
    their logical order.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        max_writes_per_commit: int = DEFAULT_MAX_WRITES_PER_COMMIT,
        apply_op: Callable[[Session, WriteOp], None] = _apply_op,
    ) -> None:
        if max_writes_per_commit <= 0:
            raise ValueError("max_writes_per_commit must be greater than 0")
        self.session_factory = session_factory
        self.max_writes_per_commit = max_writes_per_commit
        self.apply_op = apply_op
        self._ops: list[WriteOp] = []

    @property
    def pending(self) -> int:
        return len(self._ops)

    def enqueue(self, op: WriteOp) -> None:
        self._ops.append(op)

    def commit(self) -> int:
        ops = self._ops[:]
        self._ops.clear()
        if not ops:
            return 0

        size = self.max_writes_per_commit
        chunks = [ops[start : start + size] for start in range(0, len(ops), size)]

        committed_writes = 0
        for index, chunk in enumerate(chunks):
            try:
                with self.session_factory.begin() as session:
                    for op in chunk:
                        self.apply_op(session, op)
            except Exception as exc:
                if index == 0:
                    raise
                raise PartialCommitError(
                    committed_chunks=index,
                    total_chunks=len(chunks),
                    committed_writes=committed_writes,
                ) from exc
            committed_writes += len(chunk)

        return committed_writes


__all__ = ["DEFAULT_MAX_WRITES_PER_COMMIT", "SqlBatchWriter"]
