"""Database repository helpers."""

from repositories.batch_writer import SqlBatchWriter
from repositories.cursor import SqlCursorStore
from repositories.match_deletion import delete_match_and_recalculate
from repositories.matches import SqlMatchSource, delete_match, fetch_match, set_match_user_ids
from repositories.rating_history import SqlLedgerStore, upsert_rating_history
from repositories.schema import ensure_ratings_schema
from repositories.users import SqlProfileStore

__all__ = [
    "SqlBatchWriter",
    "SqlCursorStore",
    "SqlLedgerStore",
    "SqlMatchSource",
    "SqlProfileStore",
    "delete_match",
    "delete_match_and_recalculate",
    "ensure_ratings_schema",
    "fetch_match",
    "set_match_user_ids",
    "upsert_rating_history",
]
