"""Evaluate the reminder and digest schedules and send whatever is due.

Run this periodically (e.g. every 15 minutes) from the backend environment as
an alternative to calling the HTTP trigger with X-API-Key. Each run is a
no-op unless the local day and time fall in a configured window and nothing
was sent yet today.

Env:
  - DATABASE_URL, APPRISE_URL, TIMEZONE (see mentorhub.core.config)
  - DRY_RUN=1 evaluates the schedules and prints the decisions without sending
"""

from __future__ import annotations

import logging
import os

from mentorhub.core.clock import get_clock
from mentorhub.core.config import settings
from mentorhub.core.db import SessionLocal
from mentorhub.core.errors import ServiceError
from mentorhub.services import settings_store
from mentorhub.services.digest import send_digest
from mentorhub.services.dispatcher import get_dispatcher
from mentorhub.services.reminders import send_reminders
from mentorhub.services.scheduler import Schedule, evaluate

log = logging.getLogger("mentorhub.scheduled")

DRY_RUN = os.getenv("DRY_RUN", "").strip() in ("1", "true", "yes")


def main() -> int:
    clock = get_clock()
    dispatcher = get_dispatcher()
    now = clock.now()
    sent = 0

    with SessionLocal() as db:
        reminder_cfg = settings_store.load_notification_settings(db)
        decision = evaluate(
            Schedule(
                enabled=reminder_cfg.enabled,
                frequency=reminder_cfg.frequency,
                day=reminder_cfg.day,
                time=reminder_cfg.time,
                last_sent=reminder_cfg.last_sent,
            ),
            now=now,
            tz=clock.tz,
        )
        log.info("reminders: %s %s", decision.state.value, decision.reason or "")
        if decision.due and not DRY_RUN:
            try:
                result = send_reminders(db, dispatcher, now=now, tz=clock.tz)
            except ServiceError as e:
                log.warning("reminders not sent: %s", e.detail)
            else:
                if result.delivered:
                    sent += 1

        digest_cfg = settings_store.load_digest_settings(db)
        decision = evaluate(
            Schedule(
                enabled=digest_cfg.enabled,
                frequency=digest_cfg.frequency,
                day=digest_cfg.day,
                time=digest_cfg.time,
                last_sent=digest_cfg.last_sent,
            ),
            now=now,
            tz=clock.tz,
        )
        log.info("digest: %s %s", decision.state.value, decision.reason or "")
        if decision.due and not DRY_RUN:
            try:
                if send_digest(db, dispatcher, now=now, tz=clock.tz).ok:
                    sent += 1
            except ServiceError as e:
                log.warning("digest not sent: %s", e.detail)

    return sent


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    n = main()
    print(f"sent={n}")
