"""Periodic team digest: recent attendance, top mentors and upcoming coverage."""

from __future__ import annotations

import logging
from calendar import monthrange
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo

from sqlalchemy import func, select
from sqlalchemy.orm import Session, joinedload

from mentorhub.core.clock import local_date
from mentorhub.core.config import settings
from mentorhub.core.errors import ServiceError
from mentorhub.models import HourAdjustment, Shift, Signup
from mentorhub.services import settings_store
from mentorhub.services.dispatcher import AppriseDispatcher, DispatchResult
from mentorhub.services.messages import format_date_medium, format_time_12h
from mentorhub.services.time_accounting import percent, round_half_up, scheduled_minutes

log = logging.getLogger("mentorhub.digest")

DIGEST_TITLE = "Team Digest Report"
TOP_MENTORS = 5
UPCOMING_DAYS = 7


def digest_period(today: date, frequency: str) -> tuple[date, date, str]:
    """Previous calendar month for monthly digests, previous 7 days otherwise."""
    if frequency == "monthly":
        last_of_prev = today.replace(day=1) - timedelta(days=1)
        start = last_of_prev.replace(day=1)
        end = last_of_prev.replace(day=monthrange(last_of_prev.year, last_of_prev.month)[1])
        return start, end, f"Monthly Digest ({start.isoformat()} to {end.isoformat()})"
    start = today - timedelta(days=7)
    end = today - timedelta(days=1)
    return start, end, f"Weekly Digest ({start.isoformat()} to {end.isoformat()})"


@dataclass
class _MentorTally:
    name: str
    hours: float = 0.0
    shifts: int = 0


def build_digest(db: Session, *, today: date, frequency: str) -> str:
    start, end, title = digest_period(today, frequency)
    lines = [title, "=" * len(title), ""]

    signups = db.execute(
        select(Signup)
        .join(Shift, Shift.id == Signup.shift_id)
        .options(joinedload(Signup.shift), joinedload(Signup.mentor))
        .where(Shift.cancelled.is_(False), Shift.date >= start, Shift.date <= end)
    ).scalars().all()

    total_signups = len(signups)
    check_ins = sum(1 for s in signups if s.checked_in_at is not None)

    lines.append("ATTENDANCE")
    lines.append(f"  Shifts held: {len({s.shift_id for s in signups})}")
    lines.append(f"  Total signups: {total_signups}")
    lines.append(f"  Check-ins: {check_ins}")
    lines.append(f"  Attendance rate: {percent(check_ins, total_signups)}%")
    lines.append("")

    tally: dict[int, _MentorTally] = {}
    for s in signups:
        t = tally.setdefault(s.mentor_id, _MentorTally(name=s.mentor.name))
        t.hours += scheduled_minutes(s.start_time, s.end_time) / 60.0
        t.shifts += 1

    adjustments = db.execute(
        select(HourAdjustment)
        .options(joinedload(HourAdjustment.mentor))
        .where(HourAdjustment.date >= start, HourAdjustment.date <= end)
    ).scalars().all()
    for adj in adjustments:
        t = tally.setdefault(adj.mentor_id, _MentorTally(name=adj.mentor.name))
        t.hours += adj.hours

    ranked = sorted(tally.values(), key=lambda t: -t.hours)
    total_hours = sum(round_half_up(t.hours, 1) for t in ranked)

    lines.append("TOP MENTORS")
    if not ranked:
        lines.append("  (No activity this period)")
    for i, t in enumerate(ranked[:TOP_MENTORS], start=1):
        lines.append(f"  {i}. {t.name} - {round_half_up(t.hours, 1)}h ({t.shifts} shifts)")
    lines.append("")

    counts = (
        select(Signup.shift_id, func.count(Signup.id).label("n"))
        .group_by(Signup.shift_id)
        .subquery()
    )
    upcoming = db.execute(
        select(Shift, func.coalesce(counts.c.n, 0))
        .outerjoin(counts, counts.c.shift_id == Shift.id)
        .where(
            Shift.date >= today,
            Shift.date <= today + timedelta(days=UPCOMING_DAYS),
            Shift.cancelled.is_(False),
        )
        .order_by(Shift.date.asc(), Shift.start_time.asc())
    ).all()

    lines.append(f"UPCOMING SHIFTS (next {UPCOMING_DAYS} days)")
    if not upcoming:
        lines.append("  (No upcoming shifts)")
    current_day = None
    for shift, n in upcoming:
        if shift.date != current_day:
            current_day = shift.date
            lines.append(f"  {format_date_medium(shift.date)}")
        label = f" ({shift.label})" if shift.label else ""
        warning = " - Needs mentors!" if n < settings.MIN_MENTOR_SIGNUPS else ""
        lines.append(
            f"    {format_time_12h(shift.start_time)}-{format_time_12h(shift.end_time)}"
            f"{label} - {n} signed up{warning}"
        )
    lines.append("")

    lines.append("TEAM STATS")
    lines.append(f"  Active mentors: {len(tally)}")
    lines.append(f"  Total hours: {round_half_up(total_hours, 1)}")

    return "\n".join(lines)


def send_digest(db: Session, dispatcher: AppriseDispatcher, *, now: datetime, tz: tzinfo) -> DispatchResult:
    """Build and broadcast the digest; record last-sent only on success."""
    broadcast_urls = settings_store.load_notification_settings(db).broadcast_url_list()
    if not broadcast_urls:
        raise ServiceError("No broadcast URLs configured (broadcast_urls)")

    cfg = settings_store.load_digest_settings(db)
    content = build_digest(db, today=local_date(now, tz), frequency=cfg.frequency)

    result = dispatcher.notify(broadcast_urls, DIGEST_TITLE, content, "info")
    if result.ok:
        settings_store.mark_digest_sent(db, now)
        log.info("digest sent to %s url(s)", len(broadcast_urls))
    else:
        log.warning("digest not delivered: %s", result.error)
    return result
