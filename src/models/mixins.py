"""SQLAlchemy mixins for the rating/stat columns shared by users and the ledger."""

from __future__ import annotations

from sqlalchemy import BigInteger, Boolean, Float, Integer
from sqlalchemy.orm import Mapped, mapped_column


class RatingStatsMixin:
    """Rating plus cumulative game, streak, and spymaster counters."""

    rating: Mapped[float] = mapped_column(Float, nullable=False)
    games_played: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    games_won: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    spymaster_games: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    spymaster_wins: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    spymaster_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    spymaster_best_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    assassins_as_spymaster: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    current_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    best_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    provisional: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class EpochMillisMixin:
    """Epoch-millisecond timestamp of the match a row was computed for."""

    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)
