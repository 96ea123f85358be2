"""Schema bootstrap for the ratings tables."""

from __future__ import annotations

from sqlalchemy.engine import Engine

from models import Base


def ensure_ratings_schema(engine: Engine) -> None:
    """Create users, matches, rating_history and recalc_cursor if missing."""
    Base.metadata.create_all(bind=engine)


__all__ = ["ensure_ratings_schema"]
