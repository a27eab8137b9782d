from __future__ import annotations

from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash

from mentorhub.services import settings_store

MIN_PASSWORD_LENGTH = 8


def verify_admin_password(db: Session, password: str) -> bool | None:
    """True/False for a configured password, None when none is stored yet."""
    stored = settings_store.get_value(db, settings_store.ADMIN_PASSWORD_KEY)
    if not stored:
        return None
    return check_password_hash(stored, password)


def set_admin_password(db: Session, password: str) -> None:
    settings_store.set_value(db, settings_store.ADMIN_PASSWORD_KEY, generate_password_hash(password))
    db.commit()
