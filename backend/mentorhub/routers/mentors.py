from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from mentorhub.auth.deps import require_admin
from mentorhub.core.db import get_db
from mentorhub.models import Mentor, Signup

router = APIRouter(tags=["mentors"])


# ---------- Schemas ----------

class MentorCreateIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")


class MentorUpdateIn(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=128)
    email: str | None = Field(default=None, min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")


def normalize_email(value: str) -> str:
    return (value or "").strip().lower()


def _signup_payload(s: Signup) -> dict:
    return {
        "id": s.id,
        "note": s.note,
        "signed_up_at": s.signed_up_at.isoformat(),
        "checked_in_at": s.checked_in_at.isoformat() if s.checked_in_at else None,
        "checked_out_at": s.checked_out_at.isoformat() if s.checked_out_at else None,
        "custom_start_time": s.custom_start_time.strftime("%H:%M") if s.custom_start_time else None,
        "custom_end_time": s.custom_end_time.strftime("%H:%M") if s.custom_end_time else None,
        "shift": {
            "id": s.shift.id,
            "date": s.shift.date.isoformat(),
            "start_time": s.shift.start_time.strftime("%H:%M"),
            "end_time": s.shift.end_time.strftime("%H:%M"),
            "label": s.shift.label,
            "cancelled": bool(s.shift.cancelled),
        },
    }


# ---------- Public ----------

@router.get("/mentors")
def list_mentors(
    email: str | None = Query(default=None),
    db: Session = Depends(get_db),
):
    """Without `email`: the mentor list. With it: that mentor and their signups."""
    if email:
        mentor = db.execute(
            select(Mentor)
            .options(selectinload(Mentor.signups).selectinload(Signup.shift))
            .where(Mentor.email == normalize_email(email))
        ).scalar_one_or_none()
        if mentor is None:
            raise HTTPException(status_code=404, detail="Mentor not found")
        signups = sorted(mentor.signups, key=lambda s: (s.shift.date, s.shift.start_time))
        return {
            "id": mentor.id,
            "name": mentor.name,
            "email": mentor.email,
            "signups": [_signup_payload(s) for s in signups],
        }

    rows = db.execute(select(Mentor.id, Mentor.name).order_by(Mentor.name.asc())).all()
    return {"mentors": [{"id": r.id, "name": r.name} for r in rows]}


@router.post("/mentors", status_code=status.HTTP_201_CREATED)
def create_mentor(payload: MentorCreateIn, db: Session = Depends(get_db)):
    email = normalize_email(payload.email)
    if db.execute(select(Mentor.id).where(Mentor.email == email)).first() is not None:
        raise HTTPException(status_code=409, detail="A mentor with this email already exists")

    obj = Mentor(name=payload.name.strip(), email=email)
    db.add(obj)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="A mentor with this email already exists")
    db.refresh(obj)
    return {"id": obj.id, "name": obj.name, "email": obj.email}


# ---------- Admin ----------

@router.patch("/admin/mentors/{mentor_id}")
def update_mentor(
    mentor_id: int,
    payload: MentorUpdateIn,
    db: Session = Depends(get_db),
    _: bool = Depends(require_admin),
):
    obj = db.get(Mentor, mentor_id)
    if obj is None:
        raise HTTPException(status_code=404, detail="Mentor not found")

    if payload.name is not None:
        obj.name = payload.name.strip()
    if payload.email is not None:
        obj.email = normalize_email(payload.email)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="A mentor with this email already exists")
    return {"id": obj.id, "name": obj.name, "email": obj.email}


@router.delete("/admin/mentors/{mentor_id}")
def delete_mentor(
    mentor_id: int,
    db: Session = Depends(get_db),
    _: bool = Depends(require_admin),
):
    """Deletes the mentor with their signups and hour adjustments."""
    obj = db.get(Mentor, mentor_id)
    if obj is None:
        raise HTTPException(status_code=404, detail="Mentor not found")
    db.delete(obj)
    db.commit()
    return {"ok": True}
