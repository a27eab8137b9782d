from __future__ import annotations

import datetime as dt

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from mentorhub.auth.deps import require_admin
from mentorhub.core.clock import Clock, get_clock
from mentorhub.core.db import get_db
from mentorhub.models import HourAdjustment, Mentor

router = APIRouter(prefix="/admin/hour-adjustments", tags=["hour-adjustments"])


class AdjustmentCreateIn(BaseModel):
    mentor_id: int = Field(..., gt=0)
    hours: float
    reason: str = Field("", max_length=500)
    date: dt.date | None = None  # defaults to today

    @field_validator("hours")
    @classmethod
    def _non_zero(cls, v: float) -> float:
        if v == 0:
            raise ValueError("hours must not be zero")
        return v


def _adjustment_payload(a: HourAdjustment) -> dict:
    return {
        "id": a.id,
        "mentor_id": a.mentor_id,
        "mentor_name": a.mentor.name,
        "hours": a.hours,
        "reason": a.reason,
        "date": a.date.isoformat(),
        "created_at": a.created_at.isoformat(),
    }


@router.get("")
def list_adjustments(
    mentor_id: int | None = Query(default=None),
    db: Session = Depends(get_db),
    _: bool = Depends(require_admin),
):
    stmt = (
        select(HourAdjustment)
        .options(joinedload(HourAdjustment.mentor))
        .order_by(HourAdjustment.date.desc(), HourAdjustment.id.desc())
    )
    if mentor_id is not None:
        stmt = stmt.where(HourAdjustment.mentor_id == mentor_id)
    rows = db.execute(stmt).scalars().all()
    return {"adjustments": [_adjustment_payload(a) for a in rows]}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_adjustment(
    payload: AdjustmentCreateIn,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    _: bool = Depends(require_admin),
):
    if db.get(Mentor, payload.mentor_id) is None:
        raise HTTPException(status_code=404, detail="Mentor not found")

    obj = HourAdjustment(
        mentor_id=payload.mentor_id,
        hours=payload.hours,
        reason=payload.reason.strip(),
        date=payload.date or clock.today(),
    )
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return _adjustment_payload(obj)


@router.delete("/{adjustment_id}")
def delete_adjustment(
    adjustment_id: int,
    db: Session = Depends(get_db),
    _: bool = Depends(require_admin),
):
    obj = db.get(HourAdjustment, adjustment_id)
    if obj is None:
        raise HTTPException(status_code=404, detail="Adjustment not found")
    db.delete(obj)
    db.commit()
    return {"ok": True}
