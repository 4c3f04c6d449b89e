"""SQLAlchemy ORM models for commission requests."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Index,
    Integer,
    String,
    Text,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.db.enums import CommissionStatus, DEFAULT_COMMISSION_STATUS

_STATUS_VALUES = ", ".join(f"'{s.value}'" for s in CommissionStatus)


class Commission(Base):
    """
    A client's art commission request.

    Created by the public intake form (always ``pending``); every later change
    is made by the administrator. Image columns hold ordered lists of URLs:
    ``reference_images`` from the client, ``final_result_images`` from the artist.
    """

    __tablename__ = "commissions"
    __table_args__ = (
        CheckConstraint(f"status IN ({_STATUS_VALUES})", name="status_valid"),
        Index("idx_commissions_status_created", "status", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    client_name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[int | None] = mapped_column(Integer, nullable=True)

    status: Mapped[str] = mapped_column(
        String(20),
        default=DEFAULT_COMMISSION_STATUS.value,
        server_default=DEFAULT_COMMISSION_STATUS.value,
        nullable=False,
    )
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    # When the admin accepted / committed to finishing / blocked out time for it
    accepted_at: Mapped[datetime | None] = mapped_column(nullable=True)
    completion_date: Mapped[datetime | None] = mapped_column(nullable=True)
    scheduled_at: Mapped[datetime | None] = mapped_column(nullable=True)

    reference_images: Mapped[list[str]] = mapped_column(
        JSON, default=list, server_default=text("'[]'"), nullable=False
    )
    final_result_images: Mapped[list[str]] = mapped_column(
        JSON, default=list, server_default=text("'[]'"), nullable=False
    )

    paid_amount: Mapped[int | None] = mapped_column(Integer, nullable=True)
    payment_reference: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"<Commission id={self.id} status={self.status}>"
