"""rating_history table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base
from models.mixins import EpochMillisMixin, RatingStatsMixin


class RatingHistory(RatingStatsMixin, EpochMillisMixin, Base):
    """Rating ledger (one row per user per match, upserted on replay)."""

    __tablename__ = "rating_history"
    __table_args__ = (
        Index("idx_rating_history_user_time", "user_id", "timestamp"),
        Index("idx_rating_history_match", "match_id"),
        Index("idx_rating_history_user_peak", "user_id", "provisional", "rating"),
    )

    user_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    match_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
