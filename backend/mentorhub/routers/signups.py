from __future__ import annotations

from datetime import time

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, model_validator
from sqlalchemy.orm import Session

from mentorhub.auth.deps import optional_admin
from mentorhub.core.clock import Clock, fmt_time, get_clock
from mentorhub.core.db import get_db
from mentorhub.models import Signup
from mentorhub.services import signups as signup_service

router = APIRouter(tags=["signups"])


# ---------- Schemas ----------

class BatchItemIn(BaseModel):
    shift_id: int = Field(..., gt=0)
    note: str = Field("", max_length=500)


class SignupCreateIn(BaseModel):
    """Either a single shift (`shift_id`) or a batch (`signups`)."""

    mentor_id: int = Field(..., gt=0)
    shift_id: int | None = Field(default=None, gt=0)
    note: str = Field("", max_length=500)
    custom_start_time: time | None = None
    custom_end_time: time | None = None
    signups: list[BatchItemIn] | None = None

    @model_validator(mode="after")
    def _one_shape(self):
        if self.signups is not None:
            if not self.signups:
                raise ValueError("signups must not be empty")
        elif self.shift_id is None:
            raise ValueError("shift_id or signups is required")
        return self


class SignupCancelIn(BaseModel):
    mentor_id: int | None = None


class CheckInIn(BaseModel):
    signup_id: int | None = Field(default=None, gt=0)
    signup_ids: list[int] | None = None

    @model_validator(mode="after")
    def _one_shape(self):
        if self.signup_id is None and not self.signup_ids:
            raise ValueError("signup_id or signup_ids is required")
        return self


class SignupRefIn(BaseModel):
    signup_id: int = Field(..., gt=0)


def _signup_payload(s: Signup) -> dict:
    return {
        "id": s.id,
        "shift_id": s.shift_id,
        "mentor_id": s.mentor_id,
        "note": s.note,
        "custom_start_time": fmt_time(s.custom_start_time) if s.custom_start_time else None,
        "custom_end_time": fmt_time(s.custom_end_time) if s.custom_end_time else None,
        "signed_up_at": s.signed_up_at.isoformat(),
        "checked_in_at": s.checked_in_at.isoformat() if s.checked_in_at else None,
        "checked_out_at": s.checked_out_at.isoformat() if s.checked_out_at else None,
    }


# ---------- Endpoints ----------

@router.post("/signups", status_code=status.HTTP_201_CREATED)
def create_signup(payload: SignupCreateIn, db: Session = Depends(get_db)):
    if payload.signups is not None:
        res = signup_service.create_batch(
            db,
            mentor_id=payload.mentor_id,
            items=[(i.shift_id, i.note) for i in payload.signups],
        )
        return {
            "created": res["created"],
            "skipped": res["skipped"],
            "signups": [_signup_payload(s) for s in res["signups"]],
        }

    obj = signup_service.create_signup(
        db,
        mentor_id=payload.mentor_id,
        shift_id=payload.shift_id,
        note=payload.note,
        custom_start_time=payload.custom_start_time,
        custom_end_time=payload.custom_end_time,
    )
    return _signup_payload(obj)


@router.delete("/signups/{signup_id}")
def cancel_signup(
    signup_id: int,
    payload: SignupCancelIn | None = None,
    db: Session = Depends(get_db),
    is_admin: bool = Depends(optional_admin),
):
    mentor_id = payload.mentor_id if payload else None
    if not is_admin and mentor_id is None:
        raise HTTPException(status_code=400, detail="mentor_id is required")
    signup_service.cancel_signup(db, signup_id=signup_id, mentor_id=mentor_id, is_admin=is_admin)
    return {"ok": True}


@router.post("/check-in")
def check_in(
    payload: CheckInIn,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    is_admin: bool = Depends(optional_admin),
):
    if payload.signup_ids:
        if not is_admin:
            raise HTTPException(status_code=401, detail="Admin session required for bulk check-in")
        n = signup_service.bulk_check_in(db, signup_ids=payload.signup_ids, now=clock.now())
        return {"success": True, "checked_in": n}

    obj = signup_service.check_in(db, signup_id=payload.signup_id, now=clock.now())
    return _signup_payload(obj)


@router.post("/check-out")
def check_out(
    payload: SignupRefIn,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    obj = signup_service.check_out(db, signup_id=payload.signup_id, now=clock.now())
    return _signup_payload(obj)


@router.post("/check-in/undo")
def undo_check_in(payload: SignupRefIn, db: Session = Depends(get_db)):
    n = signup_service.undo_check_in(db, signup_id=payload.signup_id)
    return {"success": True, "cleared": n}
