from __future__ import annotations

from datetime import time

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, model_validator
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from mentorhub.auth.deps import require_admin
from mentorhub.core.clock import fmt_time
from mentorhub.core.db import get_db
from mentorhub.models import Shift, ShiftTemplate

router = APIRouter(prefix="/admin/templates", tags=["templates"])


class TemplateCreateIn(BaseModel):
    day_of_week: int = Field(..., ge=0, le=6)  # 0=Sunday
    start_time: time
    end_time: time
    label: str = Field("", max_length=100)
    is_active: bool = True

    @model_validator(mode="after")
    def _check_times(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class TemplateUpdateIn(BaseModel):
    day_of_week: int | None = Field(default=None, ge=0, le=6)
    start_time: time | None = None
    end_time: time | None = None
    label: str | None = Field(default=None, max_length=100)
    is_active: bool | None = None


def _template_payload(t: ShiftTemplate) -> dict:
    return {
        "id": t.id,
        "day_of_week": t.day_of_week,
        "start_time": fmt_time(t.start_time),
        "end_time": fmt_time(t.end_time),
        "label": t.label,
        "is_active": bool(t.is_active),
    }


@router.get("")
def list_templates(db: Session = Depends(get_db), _: bool = Depends(require_admin)):
    rows = db.execute(
        select(ShiftTemplate).order_by(ShiftTemplate.day_of_week.asc(), ShiftTemplate.start_time.asc())
    ).scalars().all()
    return {"templates": [_template_payload(t) for t in rows]}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_template(
    payload: TemplateCreateIn,
    db: Session = Depends(get_db),
    _: bool = Depends(require_admin),
):
    obj = ShiftTemplate(
        day_of_week=payload.day_of_week,
        start_time=payload.start_time,
        end_time=payload.end_time,
        label=payload.label.strip(),
        is_active=payload.is_active,
    )
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return _template_payload(obj)


@router.patch("/{template_id}")
def update_template(
    template_id: int,
    payload: TemplateUpdateIn,
    db: Session = Depends(get_db),
    _: bool = Depends(require_admin),
):
    obj = db.get(ShiftTemplate, template_id)
    if obj is None:
        raise HTTPException(status_code=404, detail="Template not found")

    data = payload.model_dump(exclude_unset=True)
    for field in ("day_of_week", "start_time", "end_time", "is_active"):
        if data.get(field) is not None:
            setattr(obj, field, data[field])
    if payload.label is not None:
        obj.label = payload.label.strip()

    if obj.end_time <= obj.start_time:
        db.rollback()
        raise HTTPException(status_code=400, detail="end_time must be after start_time")

    db.commit()
    return _template_payload(obj)


@router.delete("/{template_id}")
def delete_template(
    template_id: int,
    db: Session = Depends(get_db),
    _: bool = Depends(require_admin),
):
    """Generated shifts stay; their template_id is cleared."""
    obj = db.get(ShiftTemplate, template_id)
    if obj is None:
        raise HTTPException(status_code=404, detail="Template not found")
    db.execute(update(Shift).where(Shift.template_id == template_id).values(template_id=None))
    db.delete(obj)
    db.commit()
    return {"ok": True}
