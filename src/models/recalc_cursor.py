"""recalc_cursor table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base

RECALC_CURSOR_ID = "recalc"


class RecalcCursor(Base):
    """Watermark for the next recalculation pass (single row)."""

    __tablename__ = "recalc_cursor"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=RECALC_CURSOR_ID)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )
