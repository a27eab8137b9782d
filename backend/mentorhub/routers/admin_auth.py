from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from mentorhub.auth.deps import get_session_config, require_admin
from mentorhub.auth.passwords import MIN_PASSWORD_LENGTH, set_admin_password, verify_admin_password
from mentorhub.auth.session import COOKIE_NAME, create_admin_token
from mentorhub.core.config import settings
from mentorhub.core.db import get_db

log = logging.getLogger("mentorhub.auth")

router = APIRouter(prefix="/admin", tags=["admin-auth"])


class LoginIn(BaseModel):
    password: str = Field(..., min_length=1)


class PasswordChangeIn(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)


@router.post("/login")
def login(payload: LoginIn, response: Response, db: Session = Depends(get_db)):
    ok = verify_admin_password(db, payload.password)
    if ok is None:
        log.error("admin login attempted but no admin password is configured")
        raise HTTPException(status_code=500, detail="Admin password not configured")
    if not ok:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid password")

    token = create_admin_token(get_session_config())
    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        domain=settings.COOKIE_DOMAIN,
        path="/",
        max_age=settings.ADMIN_SESSION_TTL_SECONDS,
    )
    return {"success": True}


@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(key=COOKIE_NAME, domain=settings.COOKIE_DOMAIN, path="/")
    return {"success": True}


@router.put("/password")
def change_password(
    payload: PasswordChangeIn,
    db: Session = Depends(get_db),
    _: bool = Depends(require_admin),
):
    if not verify_admin_password(db, payload.current_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Current password is incorrect")
    set_admin_password(db, payload.new_password)
    log.info("admin password changed")
    return {"success": True}
