from __future__ import annotations

import datetime as dt
from datetime import datetime, time, timezone

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, String, Time
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mentorhub.core.db import Base


class Shift(Base):
    """A concrete block of workshop time on a specific date.

    Times are local wall-clock values; no time zone is stored.
    """

    __tablename__ = "shifts"

    id: Mapped[int] = mapped_column(primary_key=True)

    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    label: Mapped[str] = mapped_column(String(100), nullable=False, default="")

    cancelled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    template_id: Mapped[int | None] = mapped_column(
        ForeignKey("shift_templates.id", ondelete="SET NULL"), nullable=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    template = relationship("ShiftTemplate")
    signups = relationship("Signup", back_populates="shift", order_by="Signup.signed_up_at")
