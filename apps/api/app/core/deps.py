"""FastAPI dependencies for authentication, authorization, and database access."""

from typing import Generator

import jwt
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.security import ADMIN_ROLE, decode_session_token
from app.schemas.auth import AdminSession
from app.services.notification_service import NotificationGateway


# Cookie and header names
COOKIE_NAME = "admin_session"
CSRF_HEADER = "X-Requested-With"
CSRF_HEADER_VALUE = "XMLHttpRequest"


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was created with."""
    return request.app.state.settings


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after the request.
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_notifier(request: Request) -> NotificationGateway:
    """Client notification gateway configured for this app."""
    return request.app.state.notifier


def require_admin(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> AdminSession:
    """
    Authorization boundary: the caller must hold a valid admin session cookie.

    Raises:
        HTTPException 401: Missing, invalid, or expired session
    """
    token = request.cookies.get(COOKIE_NAME)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        payload = decode_session_token(token, settings)
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid session")

    if payload.get("role") != ADMIN_ROLE or not payload.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid session")

    return AdminSession(username=payload["sub"])


def require_csrf_header(request: Request) -> None:
    """
    Verify CSRF header on mutations.

    Apply to state-changing endpoints (POST, PATCH, DELETE).

    Raises:
        HTTPException 403: Missing or invalid CSRF header
    """
    if request.headers.get(CSRF_HEADER) != CSRF_HEADER_VALUE:
        raise HTTPException(
            status_code=403,
            detail=f"Missing CSRF header. Include '{CSRF_HEADER}: {CSRF_HEADER_VALUE}'"
        )
