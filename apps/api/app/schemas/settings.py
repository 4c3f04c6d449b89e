"""Pydantic schemas for intake settings and the admin dashboard."""

from pydantic import BaseModel, ConfigDict

from app.schemas.commission import CommissionRead


class SettingsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    is_commissions_open: bool
    queue_limit: int


class DashboardRead(BaseModel):
    """Admin landing view: gate state plus the pending queue."""

    settings: SettingsRead
    pending_count: int
    commissions: list[CommissionRead]
