"""Rate limiting configuration for the public endpoints."""

import os

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

IS_TESTING = os.getenv("TESTING", "").lower() in ("1", "true", "yes")

# Separates the limit string from the client address in a rate-limit key.
LIMIT_KEY_SEPARATOR = "|"

# Single-process deployment: in-memory storage is sufficient.
# Limits are per-route (see routers); no global default.
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri="memory://",
    enabled=not IS_TESTING,
)


def _limit_key(request: Request, per_minute: int) -> str:
    return f"{per_minute}/minute{LIMIT_KEY_SEPARATOR}{get_remote_address(request)}"


def submit_key(request: Request) -> str:
    """Client key for commission submissions, carrying the app's RATE_LIMIT_SUBMIT."""
    return _limit_key(request, request.app.state.settings.RATE_LIMIT_SUBMIT)


def auth_key(request: Request) -> str:
    """Client key for admin logins, carrying the app's RATE_LIMIT_AUTH."""
    return _limit_key(request, request.app.state.settings.RATE_LIMIT_AUTH)


def limit_from_key(key: str) -> str:
    """Limit provider: slowapi passes the route's key; the limit is its prefix."""
    return key.split(LIMIT_KEY_SEPARATOR, 1)[0]
