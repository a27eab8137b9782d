from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timezone, tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo

from mentorhub.core.config import settings


def as_utc(value: datetime | None) -> datetime | None:
    """Normalize a stored timestamp to an aware UTC datetime.

    SQLite hands back naive values for timezone-aware columns; everything we
    write is UTC, so a naive value is read as UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def local_date(value: datetime, tz: tzinfo) -> date:
    return as_utc(value).astimezone(tz).date()


def fmt_time(t: time) -> str:
    return t.strftime("%H:%M")


@dataclass(frozen=True)
class Clock:
    """Current instant plus the deployment's local calendar."""

    tz: tzinfo

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def local_now(self) -> datetime:
        return self.now().astimezone(self.tz)

    def today(self) -> date:
        return self.local_now().date()


@lru_cache(maxsize=1)
def deployment_tz() -> tzinfo:
    return ZoneInfo(settings.TIMEZONE)


def get_clock() -> Clock:
    """FastAPI dependency; tests override it with a frozen clock."""
    return Clock(tz=deployment_tz())
