"""SQLAlchemy ORM models."""

from app.db.models.commissions import Commission
from app.db.models.settings import AppSettings

__all__ = ["AppSettings", "Commission"]
