"""Commission intake (admission control).

Decides whether a public commission request is admitted:

1. Gate closed → QUEUE_CLOSED.
2. Pending count at/over the queue limit → auto-close the gate (best effort)
   and return QUEUE_FULL.
3. Invalid fields → VALIDATION_ERROR.
4. Otherwise insert a pending commission → ACCEPTED.

Gate and queue checks run before field validation, so a malformed request
against a full queue reports QUEUE_FULL.

The count-then-close sequence is not atomic: concurrent submissions near the
limit can each be admitted, overshooting the limit by a few. The limit is soft.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.structured_logging import build_log_context
from app.db.enums import CommissionStatus, IntakeOutcome
from app.db.models import Commission
from app.schemas.commission import CommissionSubmission
from app.services import commission_service, settings_service

logger = logging.getLogger(__name__)

MESSAGES = {
    IntakeOutcome.ACCEPTED: "Commission request received.",
    IntakeOutcome.QUEUE_CLOSED: "Commissions are currently closed.",
    IntakeOutcome.QUEUE_FULL: "Queue is full. Commissions have been auto-closed.",
    IntakeOutcome.VALIDATION_ERROR: "Missing required fields",
}


@dataclass
class IntakeResult:
    """Outcome of a submission. Business rejections are values, not exceptions."""

    outcome: IntakeOutcome
    message: str
    commission: Commission | None = None
    errors: list[dict[str, str]] = field(default_factory=list)

    @property
    def accepted(self) -> bool:
        return self.outcome == IntakeOutcome.ACCEPTED


def _result(outcome: IntakeOutcome, **kwargs) -> IntakeResult:
    return IntakeResult(outcome=outcome, message=MESSAGES[outcome], **kwargs)


def _format_validation_errors(exc: ValidationError) -> list[dict[str, str]]:
    errors = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ())) or "body"
        errors.append({"field": loc, "message": err.get("msg", "Invalid value")})
    return errors


def auto_close_queue(db: Session) -> bool:
    """
    Close the intake gate after the queue filled up.

    Best effort: a storage failure is logged and swallowed so the caller can
    still report QUEUE_FULL. Returns True if the gate was closed.
    """
    try:
        settings_service.set_commissions_open(db, False)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to auto-close commission intake")
        return False
    logger.info("Commission queue full; intake auto-closed")
    return True


def submit_commission(db: Session, payload: dict[str, Any] | None) -> IntakeResult:
    """Run admission control for one public submission."""
    intake = settings_service.get_intake_settings(db)
    if not intake.is_commissions_open:
        return _result(IntakeOutcome.QUEUE_CLOSED)

    pending_count = commission_service.count_commissions_by_status(
        db, CommissionStatus.PENDING
    )
    if pending_count >= intake.queue_limit:
        logger.info(
            "Rejecting submission: %s pending of limit %s",
            pending_count,
            intake.queue_limit,
        )
        auto_close_queue(db)
        return _result(IntakeOutcome.QUEUE_FULL)

    try:
        submission = CommissionSubmission.model_validate(payload or {})
    except ValidationError as exc:
        return _result(IntakeOutcome.VALIDATION_ERROR, errors=_format_validation_errors(exc))

    commission = commission_service.create_commission(
        db,
        email=submission.email,
        description=submission.description,
        client_name=submission.name,
        reference_images=submission.reference_images,
    )
    db.commit()

    logger.info(
        "Commission request received",
        extra=build_log_context(commission_id=commission.id, status=commission.status),
    )
    return _result(IntakeOutcome.ACCEPTED, commission=commission)
