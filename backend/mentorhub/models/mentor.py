from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mentorhub.core.db import Base


class Mentor(Base):
    __tablename__ = "mentors"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    # stored lower-cased; used as the mentor's login-free identity
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    signups = relationship("Signup", back_populates="mentor", cascade="all, delete-orphan")
    hour_adjustments = relationship("HourAdjustment", back_populates="mentor", cascade="all, delete-orphan")
