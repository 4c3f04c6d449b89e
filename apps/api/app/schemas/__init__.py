"""Pydantic schemas for API request/response models."""

from app.schemas.auth import AdminSession, LoginRequest
from app.schemas.commission import (
    CommissionDelete,
    CommissionRead,
    CommissionStatusUpdate,
    CommissionSubmission,
    CommissionSubmitResponse,
    ResultImageRemove,
    ResultImagesAdd,
)
from app.schemas.settings import DashboardRead, SettingsRead

__all__ = [
    "AdminSession",
    "CommissionDelete",
    "CommissionRead",
    "CommissionStatusUpdate",
    "CommissionSubmission",
    "CommissionSubmitResponse",
    "DashboardRead",
    "LoginRequest",
    "ResultImageRemove",
    "ResultImagesAdd",
    "SettingsRead",
]
