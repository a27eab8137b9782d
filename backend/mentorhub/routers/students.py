from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.orm import Session

from mentorhub.auth.deps import require_admin
from mentorhub.core.clock import Clock, get_clock
from mentorhub.core.db import get_db
from mentorhub.models import Student, StudentAttendance
from mentorhub.services import student_attendance as attendance_service

router = APIRouter(tags=["students"])


# ---------- Schemas ----------

class StudentCreateIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)


class StudentUpdateIn(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=128)
    is_active: bool | None = None


class StudentRefIn(BaseModel):
    student_id: int = Field(..., gt=0)


def _student_payload(s: Student) -> dict:
    return {"id": s.id, "name": s.name, "is_active": bool(s.is_active)}


def _attendance_payload(r: StudentAttendance) -> dict:
    return {
        "id": r.id,
        "student_id": r.student_id,
        "date": r.date.isoformat(),
        "checked_in_at": r.checked_in_at.isoformat(),
        "checked_out_at": r.checked_out_at.isoformat() if r.checked_out_at else None,
    }


# ---------- Public ----------

@router.get("/students")
def list_students(db: Session = Depends(get_db)):
    rows = db.execute(
        select(Student).where(Student.is_active.is_(True)).order_by(Student.name.asc())
    ).scalars().all()
    return {"students": [_student_payload(s) for s in rows]}


@router.post("/student-attendance/check-in")
def student_check_in(
    payload: StudentRefIn,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    rec = attendance_service.check_in(db, student_id=payload.student_id, today=clock.today(), now=clock.now())
    return _attendance_payload(rec)


@router.post("/student-attendance/check-out")
def student_check_out(
    payload: StudentRefIn,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    rec = attendance_service.check_out(db, student_id=payload.student_id, today=clock.today(), now=clock.now())
    return _attendance_payload(rec)


@router.get("/student-attendance")
def todays_attendance(db: Session = Depends(get_db), clock: Clock = Depends(get_clock)):
    rows = attendance_service.today_attendance(db, today=clock.today())
    return {"date": clock.today().isoformat(), "attendance": [_attendance_payload(r) for r in rows]}


# ---------- Admin ----------

@router.post("/admin/students", status_code=status.HTTP_201_CREATED)
def create_student(
    payload: StudentCreateIn,
    db: Session = Depends(get_db),
    _: bool = Depends(require_admin),
):
    obj = Student(name=payload.name.strip())
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return _student_payload(obj)


@router.patch("/admin/students/{student_id}")
def update_student(
    student_id: int,
    payload: StudentUpdateIn,
    db: Session = Depends(get_db),
    _: bool = Depends(require_admin),
):
    obj = db.get(Student, student_id)
    if obj is None:
        raise HTTPException(status_code=404, detail="Student not found")
    if payload.name is not None:
        obj.name = payload.name.strip()
    if payload.is_active is not None:
        obj.is_active = payload.is_active
    db.commit()
    return _student_payload(obj)


@router.delete("/admin/students/{student_id}")
def delete_student(
    student_id: int,
    db: Session = Depends(get_db),
    _: bool = Depends(require_admin),
):
    obj = db.get(Student, student_id)
    if obj is None:
        raise HTTPException(status_code=404, detail="Student not found")
    db.delete(obj)
    db.commit()
    return {"ok": True}
