"""ORM models."""

from models.base import Base
from models.match import Match
from models.rating_history import RatingHistory
from models.recalc_cursor import RECALC_CURSOR_ID, RecalcCursor
from models.user import User

__all__ = [
    "Base",
    "Match",
    "RECALC_CURSOR_ID",
    "RatingHistory",
    "RecalcCursor",
    "User",
]
