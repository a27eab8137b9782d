from __future__ import annotations

from datetime import datetime, time

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from mentorhub.core.errors import ConflictError, DuplicateSignupError, ForbiddenError, NotFoundError, ServiceError
from mentorhub.models import Mentor, Shift, Signup


def _require_mentor(db: Session, mentor_id: int) -> Mentor:
    mentor = db.get(Mentor, mentor_id)
    if mentor is None:
        raise NotFoundError("Mentor not found")
    return mentor


def create_signup(
    db: Session,
    *,
    mentor_id: int,
    shift_id: int,
    note: str = "",
    custom_start_time: time | None = None,
    custom_end_time: time | None = None,
) -> Signup:
    """Sign a mentor up for an open shift.

    The existence check catches the common case; the unique constraint on
    (shift_id, mentor_id) catches a concurrent insert that slipped past it.
    """
    _require_mentor(db, mentor_id)

    shift = db.get(Shift, shift_id)
    if shift is None or shift.cancelled:
        raise NotFoundError("Shift not found or cancelled")

    if custom_start_time and custom_end_time and custom_end_time <= custom_start_time:
        raise ServiceError("custom_end_time must be after custom_start_time")

    exists = db.execute(
        select(Signup.id).where(Signup.shift_id == shift_id, Signup.mentor_id == mentor_id)
    ).first()
    if exists is not None:
        raise DuplicateSignupError()

    obj = Signup(
        mentor_id=mentor_id,
        shift_id=shift_id,
        note=(note or "").strip(),
        custom_start_time=custom_start_time,
        custom_end_time=custom_end_time,
    )
    db.add(obj)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateSignupError()
    db.refresh(obj)
    return obj


def create_batch(db: Session, *, mentor_id: int, items: list[tuple[int, str]]) -> dict:
    """Sign up for several shifts at once; already-claimed shifts are skipped."""
    _require_mentor(db, mentor_id)

    shift_ids = [sid for sid, _ in items]
    valid = set(
        db.execute(select(Shift.id).where(Shift.id.in_(shift_ids), Shift.cancelled.is_(False))).scalars()
    )
    wanted = [(sid, note) for sid, note in items if sid in valid]
    if not wanted:
        raise NotFoundError("No valid shifts found")

    already = set(
        db.execute(
            select(Signup.shift_id).where(Signup.mentor_id == mentor_id, Signup.shift_id.in_(valid))
        ).scalars()
    )
    new_items = []
    seen: set[int] = set()
    for sid, note in wanted:
        if sid in already or sid in seen:
            continue
        seen.add(sid)
        new_items.append((sid, note))
    if not new_items:
        raise ConflictError("Already signed up for all selected shifts")

    created = [Signup(mentor_id=mentor_id, shift_id=sid, note=(note or "").strip()) for sid, note in new_items]
    db.add_all(created)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateSignupError()

    for obj in created:
        db.refresh(obj)
    return {"created": len(created), "skipped": len(already), "signups": created}


def cancel_signup(db: Session, *, signup_id: int, mentor_id: int | None, is_admin: bool) -> None:
    obj = db.get(Signup, signup_id)
    if obj is None:
        raise NotFoundError("Signup not found")
    if not is_admin and obj.mentor_id != mentor_id:
        raise ForbiddenError("Not your signup")
    db.delete(obj)
    db.commit()


def check_in(db: Session, *, signup_id: int, now: datetime) -> Signup:
    obj = db.get(Signup, signup_id)
    if obj is None:
        raise NotFoundError("Signup not found")
    if obj.checked_in_at is not None:
        raise ServiceError("Already checked in")
    obj.checked_in_at = now
    db.commit()
    db.refresh(obj)
    return obj


def bulk_check_in(db: Session, *, signup_ids: list[int], now: datetime) -> int:
    res = db.execute(
        update(Signup)
        .where(Signup.id.in_(signup_ids), Signup.checked_in_at.is_(None))
        .values(checked_in_at=now)
    )
    db.commit()
    return int(res.rowcount or 0)


def check_out(db: Session, *, signup_id: int, now: datetime) -> Signup:
    obj = db.get(Signup, signup_id)
    if obj is None:
        raise NotFoundError("Signup not found")
    if obj.checked_in_at is None:
        raise ServiceError("Not checked in")
    if obj.checked_out_at is not None:
        raise ServiceError("Already checked out")
    obj.checked_out_at = now
    db.commit()
    db.refresh(obj)
    return obj


def undo_check_in(db: Session, *, signup_id: int) -> int:
    """Clear check-in for this signup and the mentor's other signups that day."""
    obj = db.get(Signup, signup_id)
    if obj is None:
        raise NotFoundError("Signup not found")
    if obj.checked_in_at is None:
        raise ServiceError("Not checked in")

    same_day = select(Shift.id).where(Shift.date == obj.shift.date)
    res = db.execute(
        update(Signup)
        .where(
            Signup.mentor_id == obj.mentor_id,
            Signup.shift_id.in_(same_day),
            Signup.checked_in_at.is_not(None),
        )
        .values(checked_in_at=None, checked_out_at=None)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    return int(res.rowcount or 0)
