"""Pydantic schemas used across the project."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    error: str


class TemporaryPasswordRequest(BaseModel):
    # Both optional so that a missing field yields the localized 400 message.
    email: Optional[str] = None
    phone: Optional[str] = None


class TemporaryPasswordResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str
    whatsapp_url: str = Field(..., alias="whatsappUrl")
    phone: str
    expires_at: datetime = Field(..., alias="expiresAt")


class TemporaryPasswordStatusResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    active: bool
    expires_at: Optional[datetime] = None
    hours_remaining: float = 0.0


class ReminderResultResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    account_id: str = Field(..., alias="userId")
    status: str
    phone: Optional[str] = None
    whatsapp_url: Optional[str] = Field(default=None, alias="whatsappUrl")
    error: Optional[str] = None


class ReminderSweepResponse(BaseModel):
    success: bool = True
    message: str
    results: list[ReminderResultResponse] = Field(default_factory=list)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    account_id: str


class PasswordChangeRequest(BaseModel):
    new_password: str
    confirm_password: str


class PasswordChangeResponse(BaseModel):
    success: bool = True
    message: str


class TokenData(BaseModel):
    account_id: str
    session_id: str
    email: str
