from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from mentorhub.core.errors import NotFoundError
from mentorhub.models import HourAdjustment, Mentor, Season, Shift, Signup, Student, StudentAttendance
from mentorhub.services.time_accounting import (
    TimeRecord,
    aggregate_records,
    attendance_rate,
    build_leaderboard,
    minutes_to_hours,
    percent,
    round_half_up,
    scheduled_minutes,
    session_minutes,
)


def season_range(db: Session, season_id: str | int | None) -> tuple[date | None, date | None]:
    """Resolve a season filter; None or "all" means no filter."""
    if season_id is None or str(season_id).strip().lower() in ("", "all"):
        return None, None
    try:
        sid = int(season_id)
    except (TypeError, ValueError):
        raise NotFoundError("Season not found")
    season = db.get(Season, sid)
    if season is None:
        raise NotFoundError("Season not found")
    return season.start_date, season.end_date


def _signups_in_range(db: Session, start: date | None, end: date | None) -> list[Signup]:
    stmt = (
        select(Signup)
        .join(Shift, Shift.id == Signup.shift_id)
        .options(joinedload(Signup.shift), joinedload(Signup.mentor))
        .where(Shift.cancelled.is_(False))
    )
    if start is not None:
        stmt = stmt.where(Shift.date >= start)
    if end is not None:
        stmt = stmt.where(Shift.date <= end)
    return list(db.execute(stmt).scalars().all())


def leaderboard(db: Session, *, start: date | None = None, end: date | None = None) -> dict:
    signups = _signups_in_range(db, start, end)

    adj_stmt = select(HourAdjustment.mentor_id, HourAdjustment.hours)
    if start is not None:
        adj_stmt = adj_stmt.where(HourAdjustment.date >= start)
    if end is not None:
        adj_stmt = adj_stmt.where(HourAdjustment.date <= end)
    adjustments = [(int(m), float(h)) for m, h in db.execute(adj_stmt).all()]

    mentors = {m.id: (m.name, m.email) for m in db.execute(select(Mentor)).scalars()}

    entries, stats = build_leaderboard(
        ((s.mentor_id, scheduled_minutes(s.start_time, s.end_time)) for s in signups),
        adjustments,
        mentors,
    )

    return {
        "mentors": [
            {
                "mentor_id": e.mentor_id,
                "mentor_name": e.name,
                "mentor_email": e.email,
                "total_hours": e.total_hours,
                "shift_count": e.shift_count,
            }
            for e in entries
        ],
        "stats": {
            "total_hours": stats.total_hours,
            "avg_hours_per_mentor": stats.avg_hours_per_mentor,
            "total_shifts": stats.total_shifts,
            "mentor_count": stats.mentor_count,
        },
    }


def mentor_attendance(
    db: Session,
    *,
    today: date,
    now: datetime,
    start: date | None = None,
    end: date | None = None,
) -> dict:
    """Signups vs. check-ins per mentor, plus worked hours from check-in/out."""
    signups = _signups_in_range(db, start, end)

    records = [
        TimeRecord(
            subject_id=s.mentor_id,
            date=s.shift.date,
            checked_in_at=s.checked_in_at,
            checked_out_at=s.checked_out_at,
        )
        for s in signups
        if s.checked_in_at is not None
    ]
    worked, cohort_days = aggregate_records(records, today=today, now=now)

    per_mentor: dict[int, dict] = {}
    for s in signups:
        row = per_mentor.setdefault(
            s.mentor_id,
            {"id": s.mentor_id, "name": s.mentor.name, "email": s.mentor.email, "total_signups": 0, "total_check_ins": 0},
        )
        row["total_signups"] += 1
        if s.checked_in_at is not None:
            row["total_check_ins"] += 1

    mentors = []
    for mentor_id, row in per_mentor.items():
        t = worked.get(mentor_id)
        days = len(t.days) if t else 0
        mentors.append(
            {
                **row,
                "check_in_rate": percent(row["total_check_ins"], row["total_signups"]),
                "worked_hours": t.hours if t else 0.0,
                "days_attended": days,
                "attendance_rate": attendance_rate(days, len(cohort_days)),
            }
        )
    mentors.sort(key=lambda m: (-m["total_signups"], m["name"].lower()))

    total_signups = len(signups)
    total_check_ins = sum(1 for s in signups if s.checked_in_at is not None)
    return {
        "mentors": mentors,
        "stats": {
            "total_signups": total_signups,
            "total_check_ins": total_check_ins,
            "check_in_rate": percent(total_check_ins, total_signups),
            "mentor_count": len(per_mentor),
            "total_days": len(cohort_days),
            "worked_hours": minutes_to_hours(sum(t.minutes for t in worked.values())),
        },
    }


def _attendance_rows(db: Session, start: date | None, end: date | None, student_id: int | None = None):
    stmt = select(StudentAttendance).options(joinedload(StudentAttendance.student))
    if start is not None:
        stmt = stmt.where(StudentAttendance.date >= start)
    if end is not None:
        stmt = stmt.where(StudentAttendance.date <= end)
    if student_id is not None:
        stmt = stmt.where(StudentAttendance.student_id == student_id)
    stmt = stmt.order_by(StudentAttendance.date.desc(), StudentAttendance.checked_in_at.asc())
    return list(db.execute(stmt).scalars().all())


def student_attendance_summary(
    db: Session,
    *,
    today: date,
    now: datetime,
    start: date | None = None,
    end: date | None = None,
) -> dict:
    rows = _attendance_rows(db, start, end)
    totals, cohort_days = aggregate_records(
        (TimeRecord(r.student_id, r.date, r.checked_in_at, r.checked_out_at) for r in rows),
        today=today,
        now=now,
    )

    students = db.execute(select(Student).order_by(Student.name.asc())).scalars().all()
    result = []
    for st in students:
        t = totals.get(st.id)
        days = len(t.days) if t else 0
        result.append(
            {
                "id": st.id,
                "name": st.name,
                "total_check_ins": t.records if t else 0,
                "total_hours": t.hours if t else 0.0,
                "attendance_rate": attendance_rate(days, len(cohort_days)),
            }
        )

    avg_rate = int(round_half_up(sum(r["attendance_rate"] for r in result) / len(result), 0)) if result else 0
    return {
        "students": result,
        "stats": {
            "total_students": len(students),
            "total_days": len(cohort_days),
            "avg_attendance_rate": avg_rate,
        },
    }


def student_attendance_report(
    db: Session,
    *,
    today: date,
    now: datetime,
    start: date | None = None,
    end: date | None = None,
    student_id: int | None = None,
) -> dict:
    """Attendance grouped by day, newest first, with per-entry durations."""
    rows = _attendance_rows(db, start, end, student_id)

    days: dict[date, list[dict]] = {}
    for r in rows:
        known = r.checked_out_at is not None or r.date == today
        minutes = session_minutes(r.checked_in_at, r.checked_out_at, record_date=r.date, today=today, now=now)
        days.setdefault(r.date, []).append(
            {
                "student_id": r.student_id,
                "student_name": r.student.name,
                "checked_in_at": r.checked_in_at.isoformat(),
                "checked_out_at": r.checked_out_at.isoformat() if r.checked_out_at else None,
                "duration": int(round_half_up(minutes, 0)) if known else None,
            }
        )

    day_list = [
        {
            "date": d.isoformat(),
            "entries": entries,
            "total_students": len(entries),
            "total_minutes": sum(e["duration"] or 0 for e in entries),
        }
        for d, entries in days.items()
    ]
    total_minutes = sum(d["total_minutes"] for d in day_list)

    return {
        "days": day_list,
        "stats": {
            "total_sessions": len(rows),
            "total_days": len(days),
            "total_students": len({r.student_id for r in rows}),
            "total_hours": minutes_to_hours(total_minutes),
        },
    }
