from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any

import jwt  # PyJWT

COOKIE_NAME = "admin_session"


@dataclass(frozen=True)
class SessionConfig:
    secret: str
    issuer: str
    audience: str
    ttl_seconds: int


def create_admin_token(cfg: SessionConfig) -> str:
    now = int(time.time())
    payload: dict[str, Any] = {
        "sub": "admin",
        "iat": now,
        "exp": now + cfg.ttl_seconds,
        "iss": cfg.issuer,
        "aud": cfg.audience,
        "typ": "admin",
    }
    return jwt.encode(payload, cfg.secret, algorithm="HS256")


def decode_admin_token(cfg: SessionConfig, token: str) -> dict[str, Any]:
    payload = jwt.decode(
        token,
        cfg.secret,
        algorithms=["HS256"],
        issuer=cfg.issuer,
        audience=cfg.audience,
        options={"require": ["exp", "iat", "iss", "aud", "sub"]},
    )
    if payload.get("typ") != "admin":
        raise jwt.InvalidTokenError("not an admin session")
    return payload
