from __future__ import annotations

import logging
from datetime import date, timedelta

from sqlalchemy import select
from sqlalchemy.orm import Session

from mentorhub.models import Shift, ShiftTemplate

log = logging.getLogger("mentorhub.shift_generator")


def sunday_based_weekday(d: date) -> int:
    """0=Sunday .. 6=Saturday (Python's weekday() starts at Monday)."""
    return (d.weekday() + 1) % 7


def generate_shifts_from_templates(db: Session, *, today: date, weeks_ahead: int) -> int:
    """Create missing shifts for active templates in [today, today + weeks_ahead weeks).

    A shift counts as existing when one with the same date, start and end
    time is already stored, so repeated runs over the same window create
    nothing. Returns the number of shifts created.
    """
    templates = db.execute(
        select(ShiftTemplate).where(ShiftTemplate.is_active.is_(True)).order_by(ShiftTemplate.id.asc())
    ).scalars().all()
    if not templates:
        return 0

    by_weekday: dict[int, list[ShiftTemplate]] = {}
    for t in templates:
        if not 0 <= t.day_of_week <= 6:
            log.warning("skipping template id=%s with invalid day_of_week=%s", t.id, t.day_of_week)
            continue
        by_weekday.setdefault(t.day_of_week, []).append(t)

    end = today + timedelta(weeks=weeks_ahead)
    existing = {
        (s.date, s.start_time, s.end_time)
        for s in db.execute(select(Shift).where(Shift.date >= today, Shift.date < end)).scalars()
    }

    created = 0
    day = today
    while day < end:
        for t in by_weekday.get(sunday_based_weekday(day), []):
            key = (day, t.start_time, t.end_time)
            if key in existing:
                continue
            db.add(
                Shift(
                    date=day,
                    start_time=t.start_time,
                    end_time=t.end_time,
                    label=t.label,
                    template_id=t.id,
                )
            )
            existing.add(key)
            created += 1
        day += timedelta(days=1)

    if created:
        db.commit()
    log.info("generated %s shift(s) for %s week(s) from %s", created, weeks_ahead, today)
    return created
