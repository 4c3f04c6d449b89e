"""Enum definitions for application constants."""

from app.db.enums.commissions import (
    ALLOWED_STATUS_TRANSITIONS,
    CommissionStatus,
    IntakeOutcome,
)
from app.db.enums.defaults import (
    DEFAULT_CLIENT_NAME,
    DEFAULT_COMMISSION_STATUS,
    DEFAULT_COMMISSIONS_OPEN,
    DEFAULT_QUEUE_LIMIT,
)

__all__ = [
    "ALLOWED_STATUS_TRANSITIONS",
    "CommissionStatus",
    "DEFAULT_CLIENT_NAME",
    "DEFAULT_COMMISSION_STATUS",
    "DEFAULT_COMMISSIONS_OPEN",
    "DEFAULT_QUEUE_LIMIT",
    "IntakeOutcome",
]
