"""matches table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Enum, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from domain.common import MatchStatus
from models.base import Base, JSONType


class Match(Base):
    """Match record written by the game service; read-mostly for the ratings engine."""

    __tablename__ = "matches"
    __table_args__ = (Index("idx_matches_completed_at", "completed_at"),)

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    status: Mapped[MatchStatus] = mapped_column(
        Enum(MatchStatus, name="match_status", native_enum=False),
        nullable=False,
        default=MatchStatus.IN_PROGRESS,
    )
    blue_user_ids: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    red_user_ids: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    blue_spymaster: Mapped[str | None] = mapped_column(String(128), nullable=True)
    red_spymaster: Mapped[str | None] = mapped_column(String(128), nullable=True)
    blue_agents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    red_agents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    completed_at: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    # Flattened roster kept in sync by the ratings engine.
    user_ids: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )
