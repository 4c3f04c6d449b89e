"""FastAPI application entry point."""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import Settings, get_settings
from app.core.rate_limit import limiter
from app.core.structured_logging import configure_logging
from app.db.session import build_session_factory, create_engine_with_settings
from app.routers import admin_commissions, admin_settings, auth, commissions_public
from app.services.notification_service import (
    NotificationGateway,
    build_notification_gateway,
)

logger = logging.getLogger(__name__)

ROBOTS_HEADER_VALUE = "noai, noimageai"


def _init_sentry(settings: Settings) -> None:
    """Sentry Integration (optional, for production error tracking)."""
    if not settings.SENTRY_DSN or settings.ENV == "dev":
        return

    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENV,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
        traces_sample_rate=0.1,  # 10% of requests for performance monitoring
        send_default_pii=False,  # Client emails stay out of Sentry
    )
    logger.info("Sentry initialized for error tracking")


def create_app(
    settings: Settings | None = None,
    session_factory: sessionmaker[Session] | None = None,
    notifier: NotificationGateway | None = None,
) -> FastAPI:
    """
    Build the API with explicit configuration.

    ``session_factory`` and ``notifier`` default to ones derived from
    ``settings``; tests pass their own.
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)
    _init_sentry(settings)

    if session_factory is None:
        session_factory = build_session_factory(create_engine_with_settings(settings))

    app = FastAPI(
        title="Commission API",
        description="Art commission intake and admin management API",
        version=settings.VERSION,
        docs_url="/docs" if settings.is_dev else None,
        redoc_url="/redoc" if settings.is_dev else None,
    )
    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.notifier = notifier or build_notification_gateway(settings)

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # CORS middleware - must be added before routers
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,  # Required for cookies
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "X-Requested-With"],
    )

    @app.middleware("http")
    async def robots_header(request: Request, call_next):
        """Ask crawlers not to use artwork for AI training."""
        response = await call_next(request)
        response.headers["X-Robots-Tag"] = ROBOTS_HEADER_VALUE
        return response

    # ========================================================================
    # Routers
    # ========================================================================

    app.include_router(auth.router)
    app.include_router(commissions_public.router)
    app.include_router(admin_commissions.router)
    app.include_router(admin_settings.router)

    # ========================================================================
    # Health Check
    # ========================================================================

    @app.get("/health")
    def health():
        """
        Health check endpoint.

        Verifies database connectivity and returns environment info.
        """
        with app.state.session_factory() as db:
            db.execute(text("SELECT 1"))
        return {"status": "ok", "env": settings.ENV, "version": settings.VERSION}

    return app
