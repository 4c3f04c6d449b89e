"""Application configuration with environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    # App Version (format: a.bc.de - major.feature.patch)
    VERSION: str = "0.01.00"

    # Database
    DATABASE_URL: str = "sqlite:///./commissions.db"
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800

    # Session Token (supports key rotation)
    JWT_SECRET: str = "change-this-in-production"
    JWT_SECRET_PREVIOUS: str = ""  # Set during rotation, clear after
    JWT_EXPIRES_HOURS: int = 24

    # Administrator credentials (single admin account)
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = ""

    # CORS
    CORS_ORIGINS: str = "http://localhost:5173"

    # Outbound email (Resend). Empty key = log-only notifications.
    RESEND_API_KEY: str = ""
    EMAIL_FROM: str = "commissions@example.com"
    ARTIST_NAME: str = "Your Artist"

    # Error Tracking (optional, set in production)
    SENTRY_DSN: str = ""

    # Rate Limiting (requests per minute)
    RATE_LIMIT_SUBMIT: int = 10
    RATE_LIMIT_AUTH: int = 5

    # Commission intake
    # Enforce pending→approved|rejected, approved→completed|rejected, completed→paid|rejected
    STRICT_STATUS_TRANSITIONS: bool = False

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def jwt_secrets(self) -> list[str]:
        """Returns list of valid secrets (current first, then previous if set)."""
        secrets = [self.JWT_SECRET]
        if self.JWT_SECRET_PREVIOUS:
            secrets.append(self.JWT_SECRET_PREVIOUS)
        return secrets

    @property
    def cookie_secure(self) -> bool:
        """Secure cookies only in production."""
        return self.ENV not in ("dev", "test")

    @property
    def is_dev(self) -> bool:
        return self.ENV == "dev"


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process (explicit, not at import time)."""
    return Settings()
