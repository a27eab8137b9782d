from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, model_validator
from sqlalchemy import select
from sqlalchemy.orm import Session

from mentorhub.auth.deps import require_admin
from mentorhub.core.db import get_db
from mentorhub.models import Season

router = APIRouter(tags=["seasons"])


class SeasonCreateIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def _check_range(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class SeasonUpdateIn(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    start_date: date | None = None
    end_date: date | None = None


def _season_payload(s: Season) -> dict:
    return {
        "id": s.id,
        "name": s.name,
        "start_date": s.start_date.isoformat(),
        "end_date": s.end_date.isoformat(),
    }


@router.get("/seasons")
def list_seasons(db: Session = Depends(get_db)):
    rows = db.execute(select(Season).order_by(Season.start_date.desc())).scalars().all()
    return {"seasons": [_season_payload(s) for s in rows]}


@router.post("/admin/seasons", status_code=status.HTTP_201_CREATED)
def create_season(
    payload: SeasonCreateIn,
    db: Session = Depends(get_db),
    _: bool = Depends(require_admin),
):
    obj = Season(name=payload.name.strip(), start_date=payload.start_date, end_date=payload.end_date)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return _season_payload(obj)


@router.patch("/admin/seasons/{season_id}")
def update_season(
    season_id: int,
    payload: SeasonUpdateIn,
    db: Session = Depends(get_db),
    _: bool = Depends(require_admin),
):
    obj = db.get(Season, season_id)
    if obj is None:
        raise HTTPException(status_code=404, detail="Season not found")

    if payload.name is not None:
        obj.name = payload.name.strip()
    if payload.start_date is not None:
        obj.start_date = payload.start_date
    if payload.end_date is not None:
        obj.end_date = payload.end_date
    if obj.end_date < obj.start_date:
        db.rollback()
        raise HTTPException(status_code=400, detail="end_date must not be before start_date")

    db.commit()
    return _season_payload(obj)


@router.delete("/admin/seasons/{season_id}")
def delete_season(
    season_id: int,
    db: Session = Depends(get_db),
    _: bool = Depends(require_admin),
):
    obj = db.get(Season, season_id)
    if obj is None:
        raise HTTPException(status_code=404, detail="Season not found")
    db.delete(obj)
    db.commit()
    return {"ok": True}
