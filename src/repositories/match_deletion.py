"""Delete a match and re-derive the ratings that depended on it."""

from __future__ import annotations

from collections.abc import Callable

from sqlalchemy.orm import Session, sessionmaker

from domain.config import DEFAULT_MAX_WRITES_PER_COMMIT, DEFAULT_PAGE_SIZE
from domain.errors import MatchNotFoundError
from domain.pipeline import RecalcSummary, compensate_deleted_match
from domain.ratings.calculator import RatingParameters
from repositories.batch_writer import SqlBatchWriter
from repositories.cursor import SqlCursorStore
from repositories.matches import SqlMatchSource, delete_match, fetch_match
from repositories.rating_history import SqlLedgerStore


def delete_match_and_recalculate(
    session_factory: sessionmaker[Session],
    match_id: str,
    *,
    params: RatingParameters,
    page_size: int = DEFAULT_PAGE_SIZE,
    max_writes_per_commit: int = DEFAULT_MAX_WRITES_PER_COMMIT,
    echo: Callable[[str], None] | None = None,
) -> RecalcSummary | None:
    """Purge the match's ledger entries, re-derive later ratings, then drop the row.

    The match row is removed only after the ledger and profiles no longer
    depend on it. If any earlier step fails the row is still there and the
    same call can be repeated.
    """
    with session_factory() as session:
        deleted = fetch_match(session, match_id)
    if deleted is None:
        raise MatchNotFoundError(match_id)

    with session_factory() as session:
        summary = compensate_deleted_match(
            deleted,
            matches=SqlMatchSource(session, exclude_match_id=match_id),
            ledger=SqlLedgerStore(session),
            cursor=SqlCursorStore(session_factory),
            writer=SqlBatchWriter(session_factory, max_writes_per_commit=max_writes_per_commit),
            params=params,
            page_size=page_size,
            echo=echo,
        )

    with session_factory.begin() as session:
        delete_match(session, match_id)
    if echo is not None:
        echo(f"deleted match_id={match_id}")
    return summary


__all__ = ["delete_match_and_recalculate"]
