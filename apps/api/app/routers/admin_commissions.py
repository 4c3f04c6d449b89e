"""Admin commission management endpoints."""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.deps import (
    get_app_settings,
    get_db,
    get_notifier,
    require_admin,
    require_csrf_header,
)
from app.core.structured_logging import build_log_context
from app.db.enums import CommissionStatus
from app.schemas.commission import (
    CommissionDelete,
    CommissionRead,
    CommissionStatusUpdate,
    ResultImageRemove,
    ResultImagesAdd,
)
from app.services import commission_service, commission_status_service
from app.services.commission_service import CommissionNotFoundError
from app.services.commission_status_service import InvalidStatusTransitionError
from app.services.notification_service import (
    BackgroundNotificationGateway,
    NotificationGateway,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin/commissions",
    tags=["admin-commissions"],
    dependencies=[Depends(require_admin)],
)


@router.get("", response_model=list[CommissionRead])
def list_commissions(
    status_filter: CommissionStatus | None = Query(None, alias="status"),
    db: Session = Depends(get_db),
):
    """List all commissions, oldest first (optionally one status)."""
    try:
        return commission_service.list_commissions(db, status=status_filter)
    except SQLAlchemyError:
        logger.exception("Error fetching commissions")
        raise HTTPException(status_code=500, detail="Failed to fetch commissions")


@router.patch(
    "",
    response_model=CommissionRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_commission_status(
    body: CommissionStatusUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    notifier: NotificationGateway = Depends(get_notifier),
    settings: Settings = Depends(get_app_settings),
):
    """
    Change a commission's status and optional date/payment fields.

    pending → approved / pending → rejected also email the client, after the
    response is sent.
    """
    try:
        result = commission_status_service.change_status(
            db=db,
            commission_id=body.id,
            new_status=body.status,
            notifier=BackgroundNotificationGateway(notifier, background_tasks),
            fields=body.transition_fields(),
            strict=settings.STRICT_STATUS_TRANSITIONS,
        )
    except CommissionNotFoundError:
        raise HTTPException(status_code=404, detail="Commission not found")
    except InvalidStatusTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except SQLAlchemyError:
        db.rollback()
        logger.exception(
            "Error updating commission",
            extra=build_log_context(commission_id=body.id, status=body.status.value),
        )
        raise HTTPException(status_code=500, detail="Failed to update commission")
    return result["commission"]


@router.delete("", dependencies=[Depends(require_csrf_header)])
def delete_commission(body: CommissionDelete, db: Session = Depends(get_db)):
    """Permanently delete a commission."""
    try:
        commission_service.delete_commission(db, body.id)
        db.commit()
    except CommissionNotFoundError:
        raise HTTPException(status_code=404, detail="Commission not found")
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error deleting commission", extra=build_log_context(commission_id=body.id))
        raise HTTPException(status_code=500, detail="Failed to delete commission")
    return {"success": True}


@router.post(
    "/{commission_id}/result-images",
    response_model=CommissionRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_csrf_header)],
)
def add_result_images(
    commission_id: int,
    body: ResultImagesAdd,
    db: Session = Depends(get_db),
):
    """Append final result image URLs to a commission."""
    try:
        commission = commission_service.append_result_images(db, commission_id, body.urls)
        db.commit()
    except CommissionNotFoundError:
        raise HTTPException(status_code=404, detail="Commission not found")
    except SQLAlchemyError:
        db.rollback()
        logger.exception(
            "Error adding result images", extra=build_log_context(commission_id=commission_id)
        )
        raise HTTPException(status_code=500, detail="Failed to update result images")
    return commission


@router.delete(
    "/{commission_id}/result-images",
    response_model=CommissionRead,
    dependencies=[Depends(require_csrf_header)],
)
def remove_result_image(
    commission_id: int,
    body: ResultImageRemove,
    db: Session = Depends(get_db),
):
    """Remove one final result image URL from a commission."""
    try:
        commission = commission_service.remove_result_image(db, commission_id, body.image_url)
        db.commit()
    except CommissionNotFoundError:
        raise HTTPException(status_code=404, detail="Commission not found")
    except SQLAlchemyError:
        db.rollback()
        logger.exception(
            "Error removing result image", extra=build_log_context(commission_id=commission_id)
        )
        raise HTTPException(status_code=500, detail="Failed to update result images")
    return commission
