"""Worked-time rules and aggregate statistics.

Everything here is pure: callers pass the current instant and the local
"today" explicitly, so results do not depend on the process clock.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import ROUND_HALF_UP, Decimal

from mentorhub.core.clock import as_utc


def session_minutes(
    checked_in_at: datetime | None,
    checked_out_at: datetime | None,
    *,
    record_date: date,
    today: date,
    now: datetime,
) -> float:
    """Minutes worked for one check-in/check-out record.

    - both timestamps: end - start, never negative
    - open record dated today: counted up to `now`
    - open record on a past date: 0, the real duration is unknown
    """
    start = as_utc(checked_in_at)
    if start is None:
        return 0.0

    end = as_utc(checked_out_at)
    if end is None:
        if record_date != today:
            return 0.0
        end = as_utc(now)

    return max(0.0, (end - start).total_seconds() / 60.0)


def scheduled_minutes(start: time, end: time) -> float:
    """Length of a wall-clock window on a single day, floored at zero."""
    minutes = (end.hour * 60 + end.minute) - (start.hour * 60 + start.minute)
    return float(max(0, minutes))


def round_half_up(value: float, places: int = 1) -> float:
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def minutes_to_hours(minutes: float) -> float:
    return round_half_up(minutes / 60.0, 1)


def percent(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    ratio = Decimal(part * 100) / Decimal(whole)
    return int(ratio.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def attendance_rate(subject_days: int, cohort_days: int) -> int:
    """Share of the cohort's active days on which this subject showed up."""
    return percent(subject_days, cohort_days)


def in_range(d: date, start: date | None, end: date | None) -> bool:
    if start is not None and d < start:
        return False
    if end is not None and d > end:
        return False
    return True


@dataclass
class SubjectTotals:
    subject_id: int
    minutes: float = 0.0
    records: int = 0
    days: set[date] = field(default_factory=set)

    @property
    def hours(self) -> float:
        return minutes_to_hours(self.minutes)


@dataclass(frozen=True)
class TimeRecord:
    subject_id: int
    date: date
    checked_in_at: datetime | None
    checked_out_at: datetime | None


def aggregate_records(
    records: Iterable[TimeRecord],
    *,
    today: date,
    now: datetime,
    start: date | None = None,
    end: date | None = None,
) -> tuple[dict[int, SubjectTotals], set[date]]:
    """Sum worked minutes per subject.

    Returns the per-subject totals and the set of distinct days on which any
    subject has a record (the denominator for attendance rates).
    """
    totals: dict[int, SubjectTotals] = {}
    cohort_days: set[date] = set()

    for r in records:
        if not in_range(r.date, start, end):
            continue
        t = totals.setdefault(r.subject_id, SubjectTotals(subject_id=r.subject_id))
        t.minutes += session_minutes(
            r.checked_in_at, r.checked_out_at, record_date=r.date, today=today, now=now
        )
        t.records += 1
        t.days.add(r.date)
        cohort_days.add(r.date)

    return totals, cohort_days


# ---------- Leaderboard ----------

@dataclass
class LeaderboardEntry:
    mentor_id: int
    name: str
    email: str
    total_hours: float
    shift_count: int


@dataclass
class LeaderboardStats:
    total_hours: float
    total_shifts: int
    mentor_count: int
    avg_hours_per_mentor: float


def build_leaderboard(
    signup_minutes: Iterable[tuple[int, float]],
    adjustments: Iterable[tuple[int, float]],
    mentors: Mapping[int, tuple[str, str]],
) -> tuple[list[LeaderboardEntry], LeaderboardStats]:
    """Fold scheduled signup time and manual hour adjustments per mentor.

    `signup_minutes` yields (mentor_id, minutes) per counted signup,
    `adjustments` yields (mentor_id, hours delta); `mentors` maps id to
    (name, email).
    """
    hours: dict[int, float] = {}
    shifts: dict[int, int] = {}

    for mentor_id, minutes in signup_minutes:
        hours[mentor_id] = hours.get(mentor_id, 0.0) + minutes / 60.0
        shifts[mentor_id] = shifts.get(mentor_id, 0) + 1

    for mentor_id, delta in adjustments:
        hours[mentor_id] = hours.get(mentor_id, 0.0) + float(delta)
        shifts.setdefault(mentor_id, 0)

    entries = []
    for mentor_id, h in hours.items():
        name, email = mentors.get(mentor_id, ("", ""))
        entries.append(
            LeaderboardEntry(
                mentor_id=mentor_id,
                name=name,
                email=email,
                total_hours=round_half_up(h, 1),
                shift_count=shifts.get(mentor_id, 0),
            )
        )
    entries.sort(key=lambda e: (-e.total_hours, e.name.lower()))

    total = sum(e.total_hours for e in entries)
    count = len(entries)
    stats = LeaderboardStats(
        total_hours=round_half_up(total, 1),
        total_shifts=sum(e.shift_count for e in entries),
        mentor_count=count,
        avg_hours_per_mentor=round_half_up(total / count, 1) if count else 0.0,
    )
    return entries, stats
