"""Pydantic schemas for commissions."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.db.enums import CommissionStatus


class CommissionSubmission(BaseModel):
    """
    Public commission request body.

    Validated inside the intake service (after the gate and queue checks),
    not by FastAPI, so that a closed or full queue takes precedence over
    field errors.
    """

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    name: str | None = Field(None, max_length=255)
    email: str = Field(..., max_length=255)
    description: str = Field(..., min_length=1)
    reference_images: list[str] = Field(default_factory=list, alias="referenceImages")

    @field_validator("name")
    @classmethod
    def blank_name_to_none(cls, v: str | None) -> str | None:
        return v or None

    @field_validator("email")
    @classmethod
    def email_has_at_sign(cls, v: str) -> str:
        if not v or "@" not in v:
            raise ValueError("Email must contain '@'")
        return v

    @field_validator("reference_images", mode="before")
    @classmethod
    def none_to_empty_list(cls, v):
        return [] if v is None else v


class CommissionRead(BaseModel):
    """Full commission record (admin view)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    client_name: str
    email: str
    description: str
    price: int | None
    status: CommissionStatus
    rejection_reason: str | None
    accepted_at: datetime | None
    completion_date: datetime | None
    scheduled_at: datetime | None
    reference_images: list[str]
    final_result_images: list[str]
    paid_amount: int | None
    payment_reference: str | None
    created_at: datetime


class CommissionSubmitResponse(BaseModel):
    success: bool = True
    id: int
    message: str


class CommissionStatusUpdate(BaseModel):
    """Admin status change. Optional fields are applied only when provided."""

    id: int
    status: CommissionStatus
    accepted_at: datetime | None = None
    completion_date: datetime | None = None
    scheduled_at: datetime | None = None
    paid_amount: int | None = Field(None, ge=0)
    payment_reference: str | None = Field(None, max_length=255)
    rejection_reason: str | None = None

    def transition_fields(self) -> dict:
        """Optional fields the caller actually supplied (non-null)."""
        return self.model_dump(exclude={"id", "status"}, exclude_none=True)


class CommissionDelete(BaseModel):
    id: int


class ResultImagesAdd(BaseModel):
    urls: list[str] = Field(..., min_length=1)


class ResultImageRemove(BaseModel):
    image_url: str = Field(..., min_length=1)
