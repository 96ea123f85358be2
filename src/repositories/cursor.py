"""Persistence for the recalculation watermark."""

from __future__ import annotations

from sqlalchemy import delete
from sqlalchemy.orm import Session, sessionmaker

from models import RECALC_CURSOR_ID, RecalcCursor


class SqlCursorStore:
    """Single-row cursor; each write is its own transaction."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    def get(self) -> int | None:
        with self.session_factory() as session:
            row = session.get(RecalcCursor, RECALC_CURSOR_ID)
            return None if row is None else int(row.timestamp)

    def replace(self, timestamp: int) -> None:
        with self.session_factory.begin() as session:
            session.execute(delete(RecalcCursor).where(RecalcCursor.id == RECALC_CURSOR_ID))
            session.add(RecalcCursor(id=RECALC_CURSOR_ID, timestamp=timestamp))

    def clear(self) -> None:
        with self.session_factory.begin() as session:
            session.execute(delete(RecalcCursor).where(RecalcCursor.id == RECALC_CURSOR_ID))


__all__ = ["SqlCursorStore"]
