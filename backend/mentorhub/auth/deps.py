from __future__ import annotations

import hmac
from dataclasses import dataclass

import jwt
from fastapi import Cookie, Header, HTTPException, status

from mentorhub.auth.session import COOKIE_NAME, SessionConfig, decode_admin_token
from mentorhub.core.config import settings


def get_session_config() -> SessionConfig:
    return SessionConfig(
        secret=settings.SESSION_SECRET,
        issuer=settings.SESSION_ISS,
        audience=settings.SESSION_AUD,
        ttl_seconds=settings.ADMIN_SESSION_TTL_SECONDS,
    )


def is_admin_session(token: str | None) -> bool:
    if not token:
        return False
    try:
        decode_admin_token(get_session_config(), token)
    except jwt.PyJWTError:
        return False
    return True


def require_admin(admin_session: str | None = Cookie(default=None, alias=COOKIE_NAME)) -> bool:
    if not admin_session:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    if not is_admin_session(admin_session):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid session")
    return True


def optional_admin(admin_session: str | None = Cookie(default=None, alias=COOKIE_NAME)) -> bool:
    return is_admin_session(admin_session)


@dataclass(frozen=True)
class TriggerAuth:
    is_admin: bool
    is_cron: bool

    @property
    def scheduled(self) -> bool:
        """Cron calls honour the schedule; admin calls are manual sends."""
        return self.is_cron and not self.is_admin


def require_admin_or_cron(
    admin_session: str | None = Cookie(default=None, alias=COOKIE_NAME),
    x_api_key: str | None = Header(default=None),
) -> TriggerAuth:
    is_admin = is_admin_session(admin_session)
    secret = settings.CRON_SECRET
    is_cron = bool(secret and x_api_key and hmac.compare_digest(x_api_key.encode(), secret.encode()))
    if not is_admin and not is_cron:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return TriggerAuth(is_admin=is_admin, is_cron=is_cron)
