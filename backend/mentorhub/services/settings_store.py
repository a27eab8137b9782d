"""Key/value settings table with typed views per feature area.

The `settings` table stays a plain string store so new keys need no
migration; `NotificationSettings` and `DigestSettings` are the only shapes
the rest of the code sees.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from mentorhub.core.clock import as_utc
from mentorhub.models import Setting

log = logging.getLogger("mentorhub.settings")

ADMIN_PASSWORD_KEY = "admin_password"

LOOK_AHEAD_MIN = 1
LOOK_AHEAD_MAX = 30


def get_values(db: Session, keys: list[str]) -> dict[str, str]:
    rows = db.execute(select(Setting).where(Setting.key.in_(keys))).scalars().all()
    return {r.key: r.value for r in rows}


def get_value(db: Session, key: str) -> str | None:
    row = db.get(Setting, key)
    return row.value if row is not None else None


def set_values(db: Session, values: dict[str, str]) -> None:
    """Upsert several keys. Caller commits."""
    existing = {r.key: r for r in db.execute(select(Setting).where(Setting.key.in_(list(values)))).scalars()}
    for key, value in values.items():
        row = existing.get(key)
        if row is None:
            db.add(Setting(key=key, value=value))
        else:
            row.value = value


def set_value(db: Session, key: str, value: str) -> None:
    set_values(db, {key: value})


def clamp_look_ahead(days: int) -> int:
    return max(LOOK_AHEAD_MIN, min(LOOK_AHEAD_MAX, int(days)))


def _parse_ts(raw: str | None) -> datetime | None:
    if not raw:
        return None
    try:
        return as_utc(datetime.fromisoformat(raw))
    except ValueError:
        log.warning("ignoring unparseable timestamp setting: %r", raw)
        return None


def split_urls(raw: str) -> list[str]:
    return [u.strip() for u in (raw or "").splitlines() if u.strip()]


# ---------- Reminder notifications ----------

_NOTIFY_KEYS = {
    "enabled": "notifications_enabled",
    "smtp_url": "notifications_smtp_url",
    "broadcast_urls": "notifications_broadcast_urls",
    "day": "notifications_reminder_day",
    "time": "notifications_reminder_time",
    "look_ahead_days": "notifications_look_ahead_days",
    "last_sent": "notifications_last_reminder_sent",
}


@dataclass
class NotificationSettings:
    enabled: bool = False
    smtp_url: str = ""
    broadcast_urls: str = ""
    day: str = "1"  # Monday (0=Sunday)
    time: str = "09:00"
    look_ahead_days: int = 7
    last_sent: datetime | None = None

    # reminders are always weekly
    frequency: str = "weekly"

    def broadcast_url_list(self) -> list[str]:
        return split_urls(self.broadcast_urls)


def load_notification_settings(db: Session) -> NotificationSettings:
    raw = get_values(db, list(_NOTIFY_KEYS.values()))
    d = NotificationSettings()

    try:
        look_ahead = int(raw.get(_NOTIFY_KEYS["look_ahead_days"], d.look_ahead_days))
    except ValueError:
        look_ahead = d.look_ahead_days

    return NotificationSettings(
        enabled=raw.get(_NOTIFY_KEYS["enabled"]) == "true",
        smtp_url=raw.get(_NOTIFY_KEYS["smtp_url"], d.smtp_url),
        broadcast_urls=raw.get(_NOTIFY_KEYS["broadcast_urls"], d.broadcast_urls),
        day=raw.get(_NOTIFY_KEYS["day"], d.day),
        time=raw.get(_NOTIFY_KEYS["time"], d.time),
        look_ahead_days=clamp_look_ahead(look_ahead),
        last_sent=_parse_ts(raw.get(_NOTIFY_KEYS["last_sent"])),
    )


def save_notification_settings(db: Session, s: NotificationSettings) -> None:
    """Persist everything except last_sent, which only the sender writes."""
    set_values(
        db,
        {
            _NOTIFY_KEYS["enabled"]: "true" if s.enabled else "false",
            _NOTIFY_KEYS["smtp_url"]: s.smtp_url,
            _NOTIFY_KEYS["broadcast_urls"]: s.broadcast_urls,
            _NOTIFY_KEYS["day"]: s.day,
            _NOTIFY_KEYS["time"]: s.time,
            _NOTIFY_KEYS["look_ahead_days"]: str(clamp_look_ahead(s.look_ahead_days)),
        },
    )
    db.commit()


def mark_reminder_sent(db: Session, when: datetime) -> None:
    set_value(db, _NOTIFY_KEYS["last_sent"], as_utc(when).isoformat())
    db.commit()


# ---------- Digest ----------

_DIGEST_KEYS = {
    "enabled": "digest_enabled",
    "frequency": "digest_frequency",
    "day": "digest_day",
    "time": "digest_time",
    "last_sent": "digest_last_sent",
}


@dataclass
class DigestSettings:
    enabled: bool = False
    frequency: str = "weekly"  # weekly | monthly
    day: str = "1"
    time: str = "09:00"
    last_sent: datetime | None = None


def load_digest_settings(db: Session) -> DigestSettings:
    raw = get_values(db, list(_DIGEST_KEYS.values()))
    d = DigestSettings()
    frequency = raw.get(_DIGEST_KEYS["frequency"]) or d.frequency
    return DigestSettings(
        enabled=raw.get(_DIGEST_KEYS["enabled"]) == "true",
        frequency="monthly" if frequency == "monthly" else "weekly",
        day=raw.get(_DIGEST_KEYS["day"], d.day),
        time=raw.get(_DIGEST_KEYS["time"], d.time),
        last_sent=_parse_ts(raw.get(_DIGEST_KEYS["last_sent"])),
    )


def save_digest_settings(db: Session, s: DigestSettings) -> None:
    set_values(
        db,
        {
            _DIGEST_KEYS["enabled"]: "true" if s.enabled else "false",
            _DIGEST_KEYS["frequency"]: s.frequency,
            _DIGEST_KEYS["day"]: s.day,
            _DIGEST_KEYS["time"]: s.time,
        },
    )
    db.commit()


def mark_digest_sent(db: Session, when: datetime) -> None:
    set_value(db, _DIGEST_KEYS["last_sent"], as_utc(when).isoformat())
    db.commit()
