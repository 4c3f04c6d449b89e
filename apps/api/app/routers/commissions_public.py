"""Public commission intake endpoint (no authentication)."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from app.core.deps import get_db
from app.core.rate_limit import limit_from_key, limiter, submit_key
from app.db.enums import IntakeOutcome
from app.schemas.commission import CommissionSubmitResponse
from app.services import intake_service

router = APIRouter(prefix="/commissions", tags=["commissions-public"])

REJECTION_STATUS_CODES = {
    IntakeOutcome.QUEUE_CLOSED: status.HTTP_503_SERVICE_UNAVAILABLE,
    IntakeOutcome.QUEUE_FULL: status.HTTP_503_SERVICE_UNAVAILABLE,
    IntakeOutcome.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
}


async def _read_json_body(request: Request) -> Any:
    """Parse the body ourselves so malformed JSON is a validation outcome, not a 422."""
    try:
        return await request.json()
    except ValueError:
        return None


@router.post(
    "",
    response_model=CommissionSubmitResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(limit_from_key, key_func=submit_key)
async def submit_commission(request: Request, db: Session = Depends(get_db)):
    """
    Submit a commission request.

    Error precedence: closed gate (503), then full queue (503, and the gate
    is auto-closed), then field validation (400).
    """
    payload = await _read_json_body(request)
    if payload is not None and not isinstance(payload, dict):
        payload = None

    result = await run_in_threadpool(intake_service.submit_commission, db, payload)

    if not result.accepted:
        detail: dict[str, Any] = {"code": result.outcome.value, "message": result.message}
        if result.errors:
            detail["errors"] = result.errors
        raise HTTPException(status_code=REJECTION_STATUS_CODES[result.outcome], detail=detail)

    return CommissionSubmitResponse(id=result.commission.id, message=result.message)
