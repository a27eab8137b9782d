"""Admin notification settings plus the reminder/digest triggers.

The two send endpoints accept either an admin session (manual send, only the
enabled flag is checked) or the cron shared secret (schedule guards apply).
"""

from __future__ import annotations

import logging
import re

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy.orm import Session

from mentorhub.auth.deps import TriggerAuth, require_admin, require_admin_or_cron
from mentorhub.core.clock import Clock, get_clock
from mentorhub.core.db import get_db
from mentorhub.services import settings_store
from mentorhub.services.digest import build_digest, send_digest
from mentorhub.services.dispatcher import AppriseDispatcher, get_dispatcher
from mentorhub.services.reminders import preview_reminders, send_reminders
from mentorhub.services.scheduler import Schedule, ScheduleState, evaluate

log = logging.getLogger("mentorhub.notifications")

router = APIRouter(prefix="/admin/notifications", tags=["notifications"])

_HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _check_time(v: str | None) -> str | None:
    if v is not None and not _HHMM.match(v):
        raise ValueError("time must be HH:MM")
    return v


def _check_day(day: str, frequency: str) -> str:
    """Validate the schedule day and return it in canonical form ("03" -> "3")."""
    lo, hi = (1, 31) if frequency == "monthly" else (0, 6)
    try:
        n = int(day)
    except (TypeError, ValueError):
        n = -1
    if not lo <= n <= hi:
        raise HTTPException(status_code=400, detail=f"day must be between {lo} and {hi} for {frequency} schedules")
    return str(n)


# ---------- Schemas ----------

class NotificationSettingsIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    enabled: bool | None = None
    smtp_url: str | None = Field(default=None, alias="smtpUrl")
    broadcast_urls: str | None = Field(default=None, alias="broadcastUrls")
    day: str | None = None
    time: str | None = None
    # out-of-range values are clamped, not rejected
    look_ahead_days: int | None = Field(default=None, alias="lookAheadDays")

    @field_validator("time")
    @classmethod
    def _time(cls, v: str | None) -> str | None:
        return _check_time(v)


class DigestSettingsIn(BaseModel):
    enabled: bool | None = None
    frequency: str | None = None
    day: str | None = None
    time: str | None = None

    @field_validator("time")
    @classmethod
    def _time(cls, v: str | None) -> str | None:
        return _check_time(v)

    @field_validator("frequency")
    @classmethod
    def _frequency(cls, v: str | None) -> str | None:
        if v is not None and v not in ("weekly", "monthly"):
            raise ValueError("frequency must be weekly or monthly")
        return v


def _notification_payload(s: settings_store.NotificationSettings) -> dict:
    return {
        "enabled": s.enabled,
        "smtp_url": s.smtp_url,
        "broadcast_urls": s.broadcast_urls,
        "day": s.day,
        "time": s.time,
        "look_ahead_days": s.look_ahead_days,
        "last_sent": s.last_sent.isoformat() if s.last_sent else None,
    }


def _digest_payload(s: settings_store.DigestSettings) -> dict:
    return {
        "enabled": s.enabled,
        "frequency": s.frequency,
        "day": s.day,
        "time": s.time,
        "last_sent": s.last_sent.isoformat() if s.last_sent else None,
    }


def _dispatch_failed(error: str | None) -> JSONResponse:
    return JSONResponse(status_code=502, content={"ok": False, "error": error or "Notification delivery failed"})


# ---------- Settings ----------

@router.get("/settings")
def get_notification_settings(
    db: Session = Depends(get_db),
    dispatcher: AppriseDispatcher = Depends(get_dispatcher),
    _: bool = Depends(require_admin),
):
    out = _notification_payload(settings_store.load_notification_settings(db))
    out["apprise_healthy"] = dispatcher.is_healthy()
    return out


@router.post("/settings")
def update_notification_settings(
    payload: NotificationSettingsIn,
    db: Session = Depends(get_db),
    _: bool = Depends(require_admin),
):
    current = settings_store.load_notification_settings(db)
    data = payload.model_dump(exclude_unset=True, exclude_none=True)
    for key, value in data.items():
        setattr(current, key, value.strip() if isinstance(value, str) else value)

    current.day = _check_day(current.day, "weekly")
    current.look_ahead_days = settings_store.clamp_look_ahead(current.look_ahead_days)

    settings_store.save_notification_settings(db, current)
    return _notification_payload(current)


@router.get("/digest-settings")
def get_digest_settings(db: Session = Depends(get_db), _: bool = Depends(require_admin)):
    return _digest_payload(settings_store.load_digest_settings(db))


@router.post("/digest-settings")
def update_digest_settings(
    payload: DigestSettingsIn,
    db: Session = Depends(get_db),
    _: bool = Depends(require_admin),
):
    current = settings_store.load_digest_settings(db)
    data = payload.model_dump(exclude_unset=True, exclude_none=True)
    for key, value in data.items():
        setattr(current, key, value.strip() if isinstance(value, str) else value)

    current.day = _check_day(current.day, current.frequency)

    settings_store.save_digest_settings(db, current)
    return _digest_payload(current)


# ---------- Preview / test ----------

@router.get("/preview")
def preview(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    _: bool = Depends(require_admin),
):
    cfg = settings_store.load_notification_settings(db)
    digest_cfg = settings_store.load_digest_settings(db)
    today = clock.today()
    out = preview_reminders(db, today=today, look_ahead_days=cfg.look_ahead_days).as_dict()
    out["digest"] = build_digest(db, today=today, frequency=digest_cfg.frequency)
    return out


@router.post("/test-broadcast")
def test_broadcast(
    db: Session = Depends(get_db),
    dispatcher: AppriseDispatcher = Depends(get_dispatcher),
    _: bool = Depends(require_admin),
):
    urls = settings_store.load_notification_settings(db).broadcast_url_list()
    if not urls:
        raise HTTPException(status_code=400, detail="No broadcast URLs configured (broadcast_urls)")

    res = dispatcher.notify(
        urls,
        "Test Notification",
        "This is a test message from Mentor Hub. If you can read this, broadcasts are working.",
        "info",
    )
    if not res.ok:
        return _dispatch_failed(res.error)
    return {"success": True}


# ---------- Triggers ----------

@router.post("/send-reminders")
def trigger_reminders(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    dispatcher: AppriseDispatcher = Depends(get_dispatcher),
    auth: TriggerAuth = Depends(require_admin_or_cron),
):
    cfg = settings_store.load_notification_settings(db)
    now = clock.now()
    decision = evaluate(
        Schedule(enabled=cfg.enabled, frequency=cfg.frequency, day=cfg.day, time=cfg.time, last_sent=cfg.last_sent),
        now=now,
        tz=clock.tz,
        manual=not auth.scheduled,
    )
    if decision.state is ScheduleState.DISABLED:
        raise HTTPException(status_code=400, detail="Notifications are disabled")
    if not decision.due:
        log.info("reminders skipped: %s", decision.reason)
        return {"skipped": True, "reason": decision.reason}

    result = send_reminders(db, dispatcher, now=now, tz=clock.tz)
    if result.skipped_reason:
        return {"skipped": True, "reason": result.skipped_reason}
    if not result.delivered:
        return _dispatch_failed("; ".join(result.errors))
    return {
        "success": True,
        "mentors_sent": result.mentors_sent,
        "broadcast_sent": result.broadcast_sent,
        "errors": result.errors,
    }


@router.post("/send-digest")
def trigger_digest(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    dispatcher: AppriseDispatcher = Depends(get_dispatcher),
    auth: TriggerAuth = Depends(require_admin_or_cron),
):
    cfg = settings_store.load_digest_settings(db)
    now = clock.now()
    decision = evaluate(
        Schedule(enabled=cfg.enabled, frequency=cfg.frequency, day=cfg.day, time=cfg.time, last_sent=cfg.last_sent),
        now=now,
        tz=clock.tz,
        manual=not auth.scheduled,
    )
    if decision.state is ScheduleState.DISABLED:
        raise HTTPException(status_code=400, detail="Digest is disabled")
    if not decision.due:
        log.info("digest skipped: %s", decision.reason)
        return {"skipped": True, "reason": decision.reason}

    res = send_digest(db, dispatcher, now=now, tz=clock.tz)
    if not res.ok:
        return _dispatch_failed(res.error)
    return {"success": True, "frequency": cfg.frequency}
