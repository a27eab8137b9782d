from __future__ import annotations

import datetime as dt
from datetime import datetime, timezone

from sqlalchemy import Date, DateTime, Float, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mentorhub.core.db import Base


class HourAdjustment(Base):
    __tablename__ = "hour_adjustments"

    id: Mapped[int] = mapped_column(primary_key=True)

    mentor_id: Mapped[int] = mapped_column(ForeignKey("mentors.id"), index=True, nullable=False)
    hours: Mapped[float] = mapped_column(Float, nullable=False)  # may be negative
    reason: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    date: Mapped[dt.date] = mapped_column(Date, index=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    mentor = relationship("Mentor", back_populates="hour_adjustments")
