from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from mentorhub.core.errors import NotFoundError, ServiceError
from mentorhub.models import Student, StudentAttendance


def _record_for(db: Session, student_id: int, day: date) -> StudentAttendance | None:
    return db.execute(
        select(StudentAttendance).where(
            StudentAttendance.student_id == student_id,
            StudentAttendance.date == day,
        )
    ).scalar_one_or_none()


def check_in(db: Session, *, student_id: int, today: date, now: datetime) -> StudentAttendance:
    """Idempotent: a second check-in on the same day returns the existing record."""
    student = db.get(Student, student_id)
    if student is None or not student.is_active:
        raise NotFoundError("Student not found")

    rec = _record_for(db, student_id, today)
    if rec is not None:
        return rec

    rec = StudentAttendance(student_id=student_id, date=today, checked_in_at=now)
    db.add(rec)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return _record_for(db, student_id, today)
    db.refresh(rec)
    return rec


def check_out(db: Session, *, student_id: int, today: date, now: datetime) -> StudentAttendance:
    rec = _record_for(db, student_id, today)
    if rec is None:
        raise ServiceError("Not checked in today")
    if rec.checked_out_at is not None:
        raise ServiceError("Already checked out")
    rec.checked_out_at = now
    db.commit()
    db.refresh(rec)
    return rec


def today_attendance(db: Session, *, today: date) -> list[StudentAttendance]:
    return list(
        db.execute(select(StudentAttendance).where(StudentAttendance.date == today)).scalars().all()
    )
