from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from mentorhub.auth.deps import require_admin
from mentorhub.core.clock import Clock, get_clock
from mentorhub.core.db import get_db
from mentorhub.services import reports

router = APIRouter(tags=["reports"])


@router.get("/leaderboard")
def leaderboard(
    season_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
):
    start, end = reports.season_range(db, season_id)
    return reports.leaderboard(db, start=start, end=end)


@router.get("/admin/attendance")
def mentor_attendance(
    season_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    _: bool = Depends(require_admin),
):
    start, end = reports.season_range(db, season_id)
    return reports.mentor_attendance(db, today=clock.today(), now=clock.now(), start=start, end=end)


@router.get("/admin/student-attendance")
def student_attendance(
    season_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    _: bool = Depends(require_admin),
):
    start, end = reports.season_range(db, season_id)
    return reports.student_attendance_summary(db, today=clock.today(), now=clock.now(), start=start, end=end)


@router.get("/admin/student-attendance/report")
def student_attendance_report(
    season_id: str | None = Query(default=None),
    student_id: int | None = Query(default=None),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    _: bool = Depends(require_admin),
):
    start, end = reports.season_range(db, season_id)
    return reports.student_attendance_report(
        db,
        today=clock.today(),
        now=clock.now(),
        start=start,
        end=end,
        student_id=student_id,
    )
