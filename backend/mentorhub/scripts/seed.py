"""Seed the admin password and a first season.

Safe to re-run: an existing password or season is left alone.
"""

from __future__ import annotations

import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session

from mentorhub.auth.passwords import set_admin_password
from mentorhub.core.clock import get_clock
from mentorhub.core.config import settings
from mentorhub.core.db import SessionLocal
from mentorhub.models import Season
from mentorhub.services import settings_store

log = logging.getLogger("mentorhub.seed")


def seed_admin_password(db: Session, password: str) -> bool:
    if settings_store.get_value(db, settings_store.ADMIN_PASSWORD_KEY):
        return False
    set_admin_password(db, password)
    return True


def seed_default_season(db: Session, today: date) -> bool:
    """Competition seasons run September through August."""
    if db.execute(select(Season.id)).first() is not None:
        return False
    start_year = today.year if today.month >= 9 else today.year - 1
    db.add(
        Season(
            name=f"{start_year}-{start_year + 1} Season",
            start_date=date(start_year, 9, 1),
            end_date=date(start_year + 1, 8, 31),
        )
    )
    db.commit()
    return True


def main() -> None:
    with SessionLocal() as db:
        if seed_admin_password(db, settings.ADMIN_DEFAULT_PASSWORD):
            log.info("admin password seeded from ADMIN_DEFAULT_PASSWORD")
        if seed_default_season(db, get_clock().today()):
            log.info("default season created")


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    main()
