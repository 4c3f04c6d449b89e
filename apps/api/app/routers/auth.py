"""Admin authentication endpoints (session cookie)."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from app.core.config import Settings
from app.core.deps import (
    COOKIE_NAME,
    get_app_settings,
    require_admin,
    require_csrf_header,
)
from app.core.rate_limit import auth_key, limit_from_key, limiter
from app.core.security import create_session_token, verify_admin_credentials
from app.schemas.auth import AdminSession, LoginRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
@limiter.limit(limit_from_key, key_func=auth_key)
def login(
    request: Request,
    body: LoginRequest,
    response: Response,
    settings: Settings = Depends(get_app_settings),
):
    """Exchange admin credentials for a session cookie."""
    if not verify_admin_credentials(body.username, body.password, settings):
        logger.warning("Admin login failed")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_session_token(body.username.strip().lower(), settings)
    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        max_age=settings.JWT_EXPIRES_HOURS * 3600,
        httponly=True,
        samesite="strict",
        secure=settings.cookie_secure,
        path="/",
    )
    return {"success": True}


@router.get("/check")
def check_auth(session: AdminSession = Depends(require_admin)):
    """200 if the caller holds a valid admin session, else 401."""
    return {"authenticated": True, "username": session.username}


@router.post("/logout", dependencies=[Depends(require_csrf_header)])
def logout(response: Response):
    """Clear the session cookie."""
    response.delete_cookie(COOKIE_NAME, path="/")
    return {"success": True}
