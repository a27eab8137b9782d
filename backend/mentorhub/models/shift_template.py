from __future__ import annotations

from datetime import time

from sqlalchemy import Boolean, Integer, String, Time
from sqlalchemy.orm import Mapped, mapped_column

from mentorhub.core.db import Base


class ShiftTemplate(Base):
    """Recurring weekly shift pattern (e.g. every Tuesday 18:00-21:00)."""

    __tablename__ = "shift_templates"

    id: Mapped[int] = mapped_column(primary_key=True)

    # 0=Sunday .. 6=Saturday
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    label: Mapped[str] = mapped_column(String(100), nullable=False, default="")

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
