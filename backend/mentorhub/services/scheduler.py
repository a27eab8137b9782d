"""Fire/skip decision for scheduled reminders and digests.

Guards run in a fixed order and the first failing one wins:

1. feature disabled
2. local day is not the configured day (day-of-week for weekly schedules,
   day-of-month for monthly ones)
3. local time is more than WINDOW_MINUTES away from the configured time
4. already sent on the current local date

Manual sends by an admin only go through guard 1.

The time window compares minutes since midnight without wrapping, so a
23:50 target is missed by a 00:05 trigger on the next day.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Optional

from mentorhub.core.clock import as_utc, local_date

WINDOW_MINUTES = 30

REASON_DISABLED = "disabled"
REASON_WRONG_DAY = "Not the scheduled day"
REASON_OUTSIDE_WINDOW = "Not within scheduled time window"
REASON_ALREADY_SENT = "Already sent today"


class ScheduleState(str, enum.Enum):
    DISABLED = "DISABLED"
    SKIPPED = "SKIPPED"
    DUE = "DUE"


@dataclass(frozen=True)
class Schedule:
    enabled: bool
    frequency: str  # weekly | monthly
    day: str
    time: str  # HH:MM, local
    last_sent: Optional[datetime] = None


@dataclass(frozen=True)
class ScheduleDecision:
    state: ScheduleState
    reason: Optional[str] = None

    @property
    def due(self) -> bool:
        return self.state is ScheduleState.DUE


def _minutes(hhmm: str) -> int:
    h, m = hhmm.split(":")
    return int(h) * 60 + int(m)


def current_day_key(local_now: datetime, frequency: str) -> str:
    if frequency == "monthly":
        return str(local_now.day)
    # 0=Sunday .. 6=Saturday
    return str((local_now.weekday() + 1) % 7)


def evaluate(schedule: Schedule, *, now: datetime, tz: tzinfo, manual: bool = False) -> ScheduleDecision:
    if not schedule.enabled:
        return ScheduleDecision(ScheduleState.DISABLED, REASON_DISABLED)

    if manual:
        return ScheduleDecision(ScheduleState.DUE)

    local_now = as_utc(now).astimezone(tz)

    if current_day_key(local_now, schedule.frequency) != str(schedule.day).strip():
        return ScheduleDecision(ScheduleState.SKIPPED, REASON_WRONG_DAY)

    now_minutes = local_now.hour * 60 + local_now.minute
    if abs(now_minutes - _minutes(schedule.time)) > WINDOW_MINUTES:
        return ScheduleDecision(ScheduleState.SKIPPED, REASON_OUTSIDE_WINDOW)

    if schedule.last_sent is not None and local_date(schedule.last_sent, tz) == local_now.date():
        return ScheduleDecision(ScheduleState.SKIPPED, REASON_ALREADY_SENT)

    return ScheduleDecision(ScheduleState.DUE)
