"""Singleton commission settings row."""

from sqlalchemy import Boolean, CheckConstraint, Integer, text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.db.enums import DEFAULT_COMMISSIONS_OPEN, DEFAULT_QUEUE_LIMIT


class AppSettings(Base):
    """
    Global intake settings.

    The primary key is a boolean pinned to TRUE, so the table can never hold
    more than one row.
    """

    __tablename__ = "settings"
    __table_args__ = (CheckConstraint("id", name="singleton"),)

    id: Mapped[bool] = mapped_column(
        Boolean, primary_key=True, default=True, server_default=text("TRUE")
    )
    is_commissions_open: Mapped[bool] = mapped_column(
        Boolean, default=DEFAULT_COMMISSIONS_OPEN, server_default=text("TRUE"), nullable=False
    )
    queue_limit: Mapped[int] = mapped_column(
        Integer, default=DEFAULT_QUEUE_LIMIT, server_default=text(str(DEFAULT_QUEUE_LIMIT)), nullable=False
    )
