"""
Test configuration and fixtures.

Provides:
- In-memory SQLite database per test (fresh schema, nothing to roll back)
- App built with explicit test settings and a recording notifier
- JWT session cookie minting for admin tests
- HTTPX AsyncClient with proper headers
"""
import os

# Disable rate limiting before the limiter is imported
os.environ["TESTING"] = "1"

from dataclasses import dataclass, field
from datetime import datetime
from typing import AsyncGenerator, Generator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from app.core.config import Settings
from app.core.deps import COOKIE_NAME, get_db
from app.core.security import create_session_token
from app.db import models  # noqa: F401  (register tables)
from app.db.base import Base
from app.db.session import build_session_factory
from app.main import create_app
from app.services import settings_service


# =============================================================================
# Notification doubles
# =============================================================================

@dataclass
class RecordingNotifier:
    """Captures notifications instead of sending email."""
    accepted: list[tuple[str, str, datetime]] = field(default_factory=list)
    rejected: list[tuple[str, str, str | None]] = field(default_factory=list)

    def notify_accepted(self, email: str, name: str, completion_date: datetime) -> None:
        self.accepted.append((email, name, completion_date))

    def notify_rejected(self, email: str, name: str, reason: str | None = None) -> None:
        self.rejected.append((email, name, reason))

    @property
    def total(self) -> int:
        return len(self.accepted) + len(self.rejected)


class FailingNotifier:
    """Gateway whose every send blows up."""

    def notify_accepted(self, email, name, completion_date):
        raise RuntimeError("smtp down")

    def notify_rejected(self, email, name, reason=None):
        raise RuntimeError("smtp down")


# =============================================================================
# Configuration
# =============================================================================

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "s3cret-pass"


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        ENV="test",
        DATABASE_URL="sqlite://",
        JWT_SECRET="test-secret",
        ADMIN_USERNAME=ADMIN_USERNAME,
        ADMIN_PASSWORD=ADMIN_PASSWORD,
        RESEND_API_KEY="",
        SENTRY_DSN="",
        STRICT_STATUS_TRANSITIONS=False,
    )


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """Single shared in-memory connection so every session sees the same data."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine: Engine) -> Generator[Session, None, None]:
    session = build_session_factory(engine)()
    yield session
    session.close()


@pytest.fixture
def open_queue(db: Session):
    """Factory: create the settings row with a given limit / gate state."""
    def _make(queue_limit: int = 200, is_open: bool = True):
        row = settings_service.init_default_settings(db, queue_limit=queue_limit)
        row.is_commissions_open = is_open
        db.commit()
        return row
    return _make


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def failing_notifier() -> FailingNotifier:
    return FailingNotifier()


# =============================================================================
# App / Client Fixtures
# =============================================================================

def _build_app(settings: Settings, engine: Engine, db: Session, notifier) -> FastAPI:
    app = create_app(
        settings,
        session_factory=build_session_factory(engine),
        notifier=notifier,
    )

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
def test_app(test_settings, engine, db, notifier) -> FastAPI:
    return _build_app(test_settings, engine, db, notifier)


@pytest.fixture
def strict_app(test_settings, engine, db, notifier) -> FastAPI:
    settings = test_settings.model_copy(update={"STRICT_STATUS_TRANSITIONS": True})
    return _build_app(settings, engine, db, notifier)


@dataclass
class TestAuth:
    """Test authentication context."""
    token: str
    cookie_name: str = COOKIE_NAME


@pytest.fixture
def test_auth(test_settings: Settings) -> TestAuth:
    return TestAuth(token=create_session_token(ADMIN_USERNAME, test_settings))


@pytest.fixture
async def client(test_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Unauthenticated AsyncClient for public endpoints."""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as c:
        yield c


@pytest.fixture
async def admin_client(
    test_app: FastAPI,
    test_auth: TestAuth,
) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient with admin session cookie and CSRF header."""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
        cookies={test_auth.cookie_name: test_auth.token},
        headers={"X-Requested-With": "XMLHttpRequest"},  # CSRF header
    ) as c:
        yield c


@pytest.fixture
async def strict_admin_client(
    strict_app: FastAPI,
    test_auth: TestAuth,
) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=strict_app),
        base_url="http://test",
        cookies={test_auth.cookie_name: test_auth.token},
        headers={"X-Requested-With": "XMLHttpRequest"},
    ) as c:
        yield c


@pytest.fixture
async def failing_admin_client(
    test_settings, engine, db, failing_notifier, test_auth: TestAuth
) -> AsyncGenerator[AsyncClient, None]:
    """Admin client for an app whose notification gateway always fails."""
    app = _build_app(test_settings, engine, db, failing_notifier)
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        cookies={test_auth.cookie_name: test_auth.token},
        headers={"X-Requested-With": "XMLHttpRequest"},
    ) as c:
        yield c
