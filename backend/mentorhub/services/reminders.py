"""Signup reminders: who has not signed up for anything in the look-ahead window."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, tzinfo

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from mentorhub.core.clock import local_date
from mentorhub.core.errors import ServiceError
from mentorhub.models import Mentor, Shift, Signup
from mentorhub.services import settings_store
from mentorhub.services.dispatcher import AppriseDispatcher, build_mailto_url
from mentorhub.services.messages import shift_line

log = logging.getLogger("mentorhub.reminders")

# Bulk-created mentors get addresses on this domain and never receive mail.
PLACEHOLDER_EMAIL_DOMAIN = "@placeholder.local"

MENTOR_SUBJECT = "Reminder: Sign Up for Upcoming Shifts"
BROADCAST_SUBJECT = "Mentor Signup Reminder Summary"


@dataclass(frozen=True)
class UpcomingShift:
    id: int
    date: date
    start_time: time
    end_time: time
    label: str
    signup_count: int

    def line(self) -> str:
        return shift_line(self.date, self.start_time, self.end_time, self.label, self.signup_count)


@dataclass(frozen=True)
class MentorContact:
    id: int
    name: str
    email: str


@dataclass
class ReminderPreview:
    mentors: list[MentorContact]
    upcoming_shifts: list[UpcomingShift]
    look_ahead_days: int

    def as_dict(self) -> dict:
        return {
            "mentors": [{"id": m.id, "name": m.name, "email": m.email} for m in self.mentors],
            "upcoming_shifts": [
                {
                    "id": s.id,
                    "date": s.date.isoformat(),
                    "start_time": s.start_time.strftime("%H:%M"),
                    "end_time": s.end_time.strftime("%H:%M"),
                    "label": s.label,
                    "signup_count": s.signup_count,
                }
                for s in self.upcoming_shifts
            ],
            "look_ahead_days": self.look_ahead_days,
        }


@dataclass
class ReminderResult:
    mentors_sent: int = 0
    broadcast_sent: bool = False
    errors: list[str] = field(default_factory=list)
    skipped_reason: str | None = None

    @property
    def delivered(self) -> bool:
        return self.mentors_sent > 0 or self.broadcast_sent


def preview_reminders(db: Session, *, today: date, look_ahead_days: int) -> ReminderPreview:
    """Mentors with no signup on any non-cancelled shift in [today, today + look_ahead_days]."""
    look_ahead_days = settings_store.clamp_look_ahead(look_ahead_days)
    end = today + timedelta(days=look_ahead_days)

    counts = (
        select(Signup.shift_id, func.count(Signup.id).label("n"))
        .group_by(Signup.shift_id)
        .subquery()
    )
    rows = db.execute(
        select(Shift, func.coalesce(counts.c.n, 0))
        .outerjoin(counts, counts.c.shift_id == Shift.id)
        .where(Shift.date >= today, Shift.date <= end, Shift.cancelled.is_(False))
        .order_by(Shift.date.asc(), Shift.start_time.asc())
    ).all()

    upcoming = [
        UpcomingShift(
            id=s.id,
            date=s.date,
            start_time=s.start_time,
            end_time=s.end_time,
            label=s.label or "",
            signup_count=int(n),
        )
        for s, n in rows
    ]
    if not upcoming:
        return ReminderPreview(mentors=[], upcoming_shifts=[], look_ahead_days=look_ahead_days)

    signed_up = set(
        db.execute(
            select(Signup.mentor_id).where(Signup.shift_id.in_([s.id for s in upcoming])).distinct()
        ).scalars()
    )
    mentors = db.execute(
        select(Mentor).where(~Mentor.email.contains(PLACEHOLDER_EMAIL_DOMAIN)).order_by(Mentor.name.asc())
    ).scalars()

    return ReminderPreview(
        mentors=[MentorContact(m.id, m.name, m.email) for m in mentors if m.id not in signed_up],
        upcoming_shifts=upcoming,
        look_ahead_days=look_ahead_days,
    )


def send_reminders(db: Session, dispatcher: AppriseDispatcher, *, now: datetime, tz: tzinfo) -> ReminderResult:
    """Send per-mentor emails and a broadcast summary.

    last-sent is recorded only when at least one message went out.
    """
    cfg = settings_store.load_notification_settings(db)
    preview = preview_reminders(db, today=local_date(now, tz), look_ahead_days=cfg.look_ahead_days)

    if not preview.mentors:
        return ReminderResult(skipped_reason="No mentors need reminders")

    broadcast_urls = cfg.broadcast_url_list()
    if not cfg.smtp_url and not broadcast_urls:
        raise ServiceError("No notification channels configured (smtp_url or broadcast_urls)")

    shift_lines = "\n".join(s.line() for s in preview.upcoming_shifts)
    result = ReminderResult()

    if cfg.smtp_url:
        for mentor in preview.mentors:
            body = (
                f"Hi {mentor.name},\n\n"
                f"You haven't signed up for any upcoming shifts in the next {preview.look_ahead_days} days. "
                f"Here are the available shifts:\n\n{shift_lines}\n\n"
                "Please sign up at your earliest convenience!"
            )
            res = dispatcher.notify([build_mailto_url(cfg.smtp_url, mentor.email)], MENTOR_SUBJECT, body, "info")
            if res.ok:
                result.mentors_sent += 1
            else:
                result.errors.append(f"Failed to notify {mentor.name}: {res.error}")

    if broadcast_urls:
        names = ", ".join(m.name for m in preview.mentors)
        body = (
            "Weekly Reminder Summary\n\n"
            f"{len(preview.mentors)} mentor(s) have not signed up for shifts in the next "
            f"{preview.look_ahead_days} days:\n{names}\n\nUpcoming shifts:\n{shift_lines}"
        )
        res = dispatcher.notify(broadcast_urls, BROADCAST_SUBJECT, body, "warning")
        if res.ok:
            result.broadcast_sent = True
        else:
            result.errors.append(f"Broadcast failed: {res.error}")

    if result.delivered:
        settings_store.mark_reminder_sent(db, now)
        log.info("reminders sent mentors=%s broadcast=%s", result.mentors_sent, result.broadcast_sent)
    else:
        log.warning("reminders not delivered: %s", "; ".join(result.errors))

    return result
