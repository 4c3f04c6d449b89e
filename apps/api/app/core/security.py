"""Security utilities for admin session tokens and credential checks."""

import hmac
from datetime import datetime, timedelta, timezone

import jwt

from app.core.config import Settings

ADMIN_ROLE = "admin"


# =============================================================================
# Session Token (JWT in cookie)
# =============================================================================

def create_session_token(username: str, settings: Settings) -> str:
    """
    Create signed admin session JWT.

    Always signs with current secret (JWT_SECRET).
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": username,
        "role": ADMIN_ROLE,
        "iat": now,
        "exp": now + timedelta(hours=settings.JWT_EXPIRES_HOURS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm="HS256")


def decode_session_token(token: str, settings: Settings) -> dict:
    """
    Decode and verify session JWT.

    Tries current secret first, then previous (for rotation support).

    Raises:
        jwt.InvalidTokenError: If token invalid with all secrets
    """
    last_error = None
    for secret in settings.jwt_secrets:
        try:
            return jwt.decode(token, secret, algorithms=["HS256"])
        except jwt.InvalidTokenError as e:
            last_error = e
            continue
    raise last_error  # type: ignore


# =============================================================================
# Credential checks
# =============================================================================

def verify_secret(provided: str | None, expected: str | None) -> bool:
    """Constant-time comparison; empty or missing values never match."""
    if not provided or not expected:
        return False
    return hmac.compare_digest(provided.encode(), expected.encode())


def verify_admin_credentials(username: str, password: str, settings: Settings) -> bool:
    """
    Check admin login.

    Username is case-insensitive and both values are trimmed. An unset
    ADMIN_PASSWORD disables login entirely.
    """
    username_ok = verify_secret(
        username.strip().lower(), settings.ADMIN_USERNAME.strip().lower()
    )
    password_ok = verify_secret(password.strip(), settings.ADMIN_PASSWORD)
    return username_ok and password_ok
