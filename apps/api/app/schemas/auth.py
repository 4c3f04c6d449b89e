"""Authentication-related Pydantic schemas."""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str = Field(..., max_length=255)
    password: str = Field(..., max_length=255)


class AdminSession(BaseModel):
    """Decoded admin session (the only role in this app)."""

    username: str
