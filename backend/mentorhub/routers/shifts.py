from __future__ import annotations

import datetime as dt
from datetime import date, time, timedelta

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, ConfigDict, Field, model_validator
from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from mentorhub.auth.deps import require_admin
from mentorhub.core.clock import Clock, fmt_time, get_clock
from mentorhub.core.config import settings
from mentorhub.core.db import get_db
from mentorhub.models import Shift, Signup
from mentorhub.services.shift_generator import generate_shifts_from_templates

router = APIRouter(tags=["shifts"])


# ---------- Schemas ----------

class ShiftCreateIn(BaseModel):
    date: dt.date
    start_time: time
    end_time: time
    label: str = Field("", max_length=100)

    @model_validator(mode="after")
    def _check_times(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class ShiftUpdateIn(BaseModel):
    date: dt.date | None = None
    start_time: time | None = None
    end_time: time | None = None
    label: str | None = Field(default=None, max_length=100)
    cancelled: bool | None = None


class GenerateIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    weeks_ahead: int | None = Field(default=None, ge=1, le=52, alias="weeksAhead")


def _shift_payload(s: Shift, *, with_signups: bool = True) -> dict:
    out = {
        "id": s.id,
        "date": s.date.isoformat(),
        "start_time": fmt_time(s.start_time),
        "end_time": fmt_time(s.end_time),
        "label": s.label,
        "cancelled": bool(s.cancelled),
        "template_id": s.template_id,
    }
    if with_signups:
        out["signups"] = [
            {
                "id": su.id,
                "mentor_id": su.mentor_id,
                "mentor_name": su.mentor.name,
                "note": su.note,
                "custom_start_time": fmt_time(su.custom_start_time) if su.custom_start_time else None,
                "custom_end_time": fmt_time(su.custom_end_time) if su.custom_end_time else None,
                "checked_in_at": su.checked_in_at.isoformat() if su.checked_in_at else None,
                "checked_out_at": su.checked_out_at.isoformat() if su.checked_out_at else None,
            }
            for su in s.signups
        ]
    return out


def _query_shifts(db: Session, date_from: date, date_to: date | None, *, include_cancelled: bool):
    stmt = (
        select(Shift)
        .options(selectinload(Shift.signups).selectinload(Signup.mentor))
        .where(Shift.date >= date_from)
        .order_by(Shift.date.asc(), Shift.start_time.asc())
    )
    if date_to is not None:
        stmt = stmt.where(Shift.date <= date_to)
    if not include_cancelled:
        stmt = stmt.where(Shift.cancelled.is_(False))
    return db.execute(stmt).scalars().all()


# ---------- Public ----------

@router.get("/shifts")
def list_shifts(
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Upcoming non-cancelled shifts with their signups."""
    rows = _query_shifts(db, date_from or clock.today(), date_to, include_cancelled=False)
    return {"shifts": [_shift_payload(s) for s in rows]}


# ---------- Admin ----------

@router.get("/admin/shifts")
def admin_list_shifts(
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    _: bool = Depends(require_admin),
):
    start = date_from or clock.today() - timedelta(days=30)
    rows = _query_shifts(db, start, date_to, include_cancelled=True)
    return {"shifts": [_shift_payload(s) for s in rows]}


@router.post("/admin/shifts", status_code=status.HTTP_201_CREATED)
def create_shift(
    payload: ShiftCreateIn,
    db: Session = Depends(get_db),
    _: bool = Depends(require_admin),
):
    obj = Shift(
        date=payload.date,
        start_time=payload.start_time,
        end_time=payload.end_time,
        label=payload.label.strip(),
    )
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return _shift_payload(obj, with_signups=False)


@router.patch("/admin/shifts/{shift_id}")
def update_shift(
    shift_id: int,
    payload: ShiftUpdateIn,
    db: Session = Depends(get_db),
    _: bool = Depends(require_admin),
):
    obj = db.get(Shift, shift_id)
    if obj is None:
        raise HTTPException(status_code=404, detail="Shift not found")

    data = payload.model_dump(exclude_unset=True)
    for field in ("date", "start_time", "end_time", "cancelled"):
        if data.get(field) is not None:
            setattr(obj, field, data[field])
    if payload.label is not None:
        obj.label = payload.label.strip()

    if obj.end_time <= obj.start_time:
        db.rollback()
        raise HTTPException(status_code=400, detail="end_time must be after start_time")

    db.commit()
    db.refresh(obj)
    return _shift_payload(obj)


@router.delete("/admin/shifts/{shift_id}")
def delete_shift(
    shift_id: int,
    db: Session = Depends(get_db),
    _: bool = Depends(require_admin),
):
    obj = db.get(Shift, shift_id)
    if obj is None:
        raise HTTPException(status_code=404, detail="Shift not found")

    n = db.execute(select(func.count(Signup.id)).where(Signup.shift_id == shift_id)).scalar_one()
    if n:
        raise HTTPException(status_code=400, detail="Shift has signups; cancel it instead")

    db.delete(obj)
    db.commit()
    return {"ok": True}


@router.post("/admin/shifts/generate")
def generate_shifts(
    payload: GenerateIn | None = None,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    _: bool = Depends(require_admin),
):
    weeks = (payload.weeks_ahead if payload else None) or settings.SHIFT_GENERATION_WEEKS
    created = generate_shifts_from_templates(db, today=clock.today(), weeks_ahead=weeks)
    return {"generated": created}
