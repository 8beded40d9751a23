"""Trainer profile schemas."""
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class TrainerProfileUpdate(BaseModel):
    """Upsert trainer profile request. Only provided fields change."""

    name: str | None = Field(None, min_length=2, max_length=255)
    registration: str | None = Field(None, max_length=50)
    phone: str | None = Field(None, max_length=50)
    email: EmailStr | None = None
    address: str | None = None


class TrainerProfileResponse(BaseModel):
    """Trainer profile response."""

    id: UUID
    name: str
    registration: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    updated_at: datetime

    class Config:
        from_attributes = True
