"""Settings store: the singleton intake settings row."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from app.db.enums import DEFAULT_COMMISSIONS_OPEN, DEFAULT_QUEUE_LIMIT
from app.db.models import AppSettings

logger = logging.getLogger(__name__)

SETTINGS_ROW_ID = True


@dataclass(frozen=True)
class IntakeSettings:
    """Read-only snapshot used by the admission controller."""

    is_commissions_open: bool
    queue_limit: int


DEFAULT_INTAKE_SETTINGS = IntakeSettings(
    is_commissions_open=DEFAULT_COMMISSIONS_OPEN,
    queue_limit=DEFAULT_QUEUE_LIMIT,
)


def get_settings_row(db: Session) -> AppSettings | None:
    """Return the singleton row, or None if it has never been created."""
    return db.get(AppSettings, SETTINGS_ROW_ID)


def get_intake_settings(db: Session) -> IntakeSettings:
    """Current gate + limit, falling back to defaults when no row exists."""
    row = get_settings_row(db)
    if row is None:
        return DEFAULT_INTAKE_SETTINGS
    return IntakeSettings(
        is_commissions_open=row.is_commissions_open,
        queue_limit=row.queue_limit,
    )


def init_default_settings(db: Session, queue_limit: int | None = None) -> AppSettings:
    """Create the singleton row with defaults (no-op if it exists)."""
    row = get_settings_row(db)
    if row is not None:
        return row
    row = AppSettings(
        id=SETTINGS_ROW_ID,
        is_commissions_open=DEFAULT_COMMISSIONS_OPEN,
        queue_limit=queue_limit if queue_limit is not None else DEFAULT_QUEUE_LIMIT,
    )
    db.add(row)
    db.flush()
    logger.info("Initialized intake settings (queue_limit=%s)", row.queue_limit)
    return row


def ensure_settings(db: Session) -> AppSettings:
    """Get the singleton row, creating and committing it on first use."""
    row = get_settings_row(db)
    if row is None:
        row = init_default_settings(db)
        db.commit()
    return row


def set_commissions_open(db: Session, is_open: bool) -> AppSettings:
    """Set the intake gate. Creates the row if missing. Flush only."""
    row = get_settings_row(db) or init_default_settings(db)
    row.is_commissions_open = is_open
    db.flush()
    return row


def toggle_commissions_open(db: Session) -> AppSettings:
    """Flip the intake gate and commit."""
    row = get_settings_row(db) or init_default_settings(db)
    row.is_commissions_open = not row.is_commissions_open
    db.commit()
    logger.info("Commission intake %s", "opened" if row.is_commissions_open else "closed")
    return row
