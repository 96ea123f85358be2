"""users table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Float, String, func
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base
from models.mixins import RatingStatsMixin


class User(RatingStatsMixin, Base):
    """User profile; the stat columns mirror the user's latest ledger entry."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=1200.0)
    last_played: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )
