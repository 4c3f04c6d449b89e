"""Admin dashboard and intake gate endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import get_db, require_admin, require_csrf_header
from app.db.enums import CommissionStatus
from app.schemas.commission import CommissionRead
from app.schemas.settings import DashboardRead, SettingsRead
from app.services import commission_service, settings_service

router = APIRouter(
    prefix="/admin",
    tags=["admin-settings"],
    dependencies=[Depends(require_admin)],
)


@router.get("/dashboard", response_model=DashboardRead)
def get_dashboard(db: Session = Depends(get_db)):
    """
    Gate state plus pending commissions (newest first).

    Creates the settings row on first load.
    """
    row = settings_service.ensure_settings(db)
    pending = commission_service.list_commissions_by_status(
        db, CommissionStatus.PENDING, newest_first=True
    )
    return DashboardRead(
        settings=SettingsRead.model_validate(row),
        pending_count=len(pending),
        commissions=[CommissionRead.model_validate(c) for c in pending],
    )


@router.get("/settings", response_model=SettingsRead)
def get_intake_settings(db: Session = Depends(get_db)):
    """Current gate and queue limit (defaults if never initialized)."""
    intake = settings_service.get_intake_settings(db)
    return SettingsRead(
        is_commissions_open=intake.is_commissions_open,
        queue_limit=intake.queue_limit,
    )


@router.post(
    "/settings/toggle",
    response_model=SettingsRead,
    dependencies=[Depends(require_csrf_header)],
)
def toggle_commissions(db: Session = Depends(get_db)):
    """Open or close commission intake."""
    row = settings_service.toggle_commissions_open(db)
    return SettingsRead.model_validate(row)
