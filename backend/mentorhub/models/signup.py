from __future__ import annotations

from datetime import datetime, time, timezone

from sqlalchemy import DateTime, ForeignKey, String, Time, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mentorhub.core.db import Base


class Signup(Base):
    """A mentor's claim on a shift."""

    __tablename__ = "signups"
    __table_args__ = (
        UniqueConstraint("shift_id", "mentor_id", name="uq_signups_shift_mentor"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    shift_id: Mapped[int] = mapped_column(ForeignKey("shifts.id"), index=True)
    mentor_id: Mapped[int] = mapped_column(ForeignKey("mentors.id"), index=True)

    # Optional per-signup window overriding the shift's own times.
    custom_start_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    custom_end_time: Mapped[time | None] = mapped_column(Time, nullable=True)

    note: Mapped[str] = mapped_column(String(500), nullable=False, default="")

    signed_up_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    checked_in_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    checked_out_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    shift = relationship("Shift", back_populates="signups")
    mentor = relationship("Mentor", back_populates="signups")

    @property
    def start_time(self) -> time:
        return self.custom_start_time or self.shift.start_time

    @property
    def end_time(self) -> time:
        return self.custom_end_time or self.shift.end_time
