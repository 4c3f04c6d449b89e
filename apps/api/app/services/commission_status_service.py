"""Commission status changes (apply + notify)."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, TypedDict

from sqlalchemy.orm import Session

from app.core.structured_logging import build_log_context
from app.db.enums import ALLOWED_STATUS_TRANSITIONS, CommissionStatus
from app.db.models import Commission
from app.services import commission_service
from app.services.commission_service import (
    CommissionNotFoundError,
    CommissionServiceError,
)
from app.services.notification_service import NotificationGateway

logger = logging.getLogger(__name__)

TRANSITION_FIELDS = frozenset(
    {
        "accepted_at",
        "completion_date",
        "scheduled_at",
        "paid_amount",
        "payment_reference",
        "rejection_reason",
    }
)


class InvalidStatusTransitionError(CommissionServiceError):
    """Status change not allowed by the transition table."""

    pass


class StatusChangeResult(TypedDict):
    """Result of a status change operation."""

    commission: Commission
    previous_status: str
    notification: str | None  # 'accepted', 'rejected' or None
    notification_failed: bool


def is_transition_allowed(current: str, target: str) -> bool:
    """Check a change against the strict transition table. Same-status is always allowed."""
    if current == target:
        return True
    return CommissionStatus(target) in ALLOWED_STATUS_TRANSITIONS[CommissionStatus(current)]


def _notification_for(previous: str, new: str) -> str | None:
    if previous != CommissionStatus.PENDING.value:
        return None
    if new == CommissionStatus.APPROVED.value:
        return "accepted"
    if new == CommissionStatus.REJECTED.value:
        return "rejected"
    return None


def _dispatch_notification(
    notifier: NotificationGateway,
    kind: str,
    commission: Commission,
    fields: dict[str, Any],
) -> bool:
    """Send the client notification. Returns False if the gateway failed."""
    try:
        if kind == "accepted":
            notifier.notify_accepted(
                commission.email,
                commission.client_name,
                fields.get("completion_date")
                or commission.completion_date
                or datetime.now(timezone.utc),
            )
        else:
            notifier.notify_rejected(
                commission.email,
                commission.client_name,
                fields.get("rejection_reason") or commission.rejection_reason,
            )
    except Exception:
        logger.exception(
            "Commission %s notification failed",
            kind,
            extra=build_log_context(commission_id=commission.id, status=commission.status),
        )
        return False
    return True


def change_status(
    db: Session,
    commission_id: int,
    new_status: CommissionStatus | str,
    notifier: NotificationGateway,
    fields: dict[str, Any] | None = None,
    strict: bool = False,
) -> StatusChangeResult:
    """
    Set a commission's status and apply any provided date/payment fields.

    Fields are written verbatim (no cross-field checks). Only
    pending → approved and pending → rejected notify the client; notification
    errors are logged and never fail the change.

    Raises:
        CommissionNotFoundError: unknown id (nothing written, nothing sent)
        InvalidStatusTransitionError: ``strict`` and the change is not in the table
    """
    new_status = CommissionStatus(new_status).value
    fields = {k: v for k, v in (fields or {}).items() if v is not None}
    unknown = set(fields) - TRANSITION_FIELDS
    if unknown:
        raise ValueError(f"Unsupported status change fields: {', '.join(sorted(unknown))}")

    commission = commission_service.get_commission(db, commission_id)
    if not commission:
        raise CommissionNotFoundError(f"Commission {commission_id} not found")

    previous_status = commission.status
    if strict and not is_transition_allowed(previous_status, new_status):
        raise InvalidStatusTransitionError(
            f"Cannot change commission from {previous_status} to {new_status}"
        )

    commission = commission_service.update_commission(
        db, commission_id, {"status": new_status, **fields}
    )
    db.commit()

    logger.info(
        "Commission status changed",
        extra=build_log_context(
            commission_id=commission.id,
            status=new_status,
            previous_status=previous_status,
        ),
    )

    notification = _notification_for(previous_status, new_status)
    notification_failed = False
    if notification:
        notification_failed = not _dispatch_notification(
            notifier, notification, commission, fields
        )

    return StatusChangeResult(
        commission=commission,
        previous_status=previous_status,
        notification=notification,
        notification_failed=notification_failed,
    )
