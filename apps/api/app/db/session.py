from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import Settings


def create_engine_with_settings(settings: Settings) -> Engine:
    """Build the engine for ``settings.DATABASE_URL`` with pool configuration."""
    url = make_url(settings.DATABASE_URL)
    backend = url.get_backend_name()

    if backend == "sqlite":
        # SQLite ignores pool sizing; allow use across FastAPI's threadpool
        return create_engine(
            url, connect_args={"check_same_thread": False}, pool_pre_ping=True
        )

    connect_args = {}
    if backend.startswith("postgresql"):
        connect_args["options"] = "-c timezone=utc"

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        connect_args=connect_args,
    )


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
