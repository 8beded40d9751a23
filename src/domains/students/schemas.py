"""Student schemas for request/response validation."""
from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from src.domains.assessments.schemas import AssessmentResponse
from src.domains.billing.schemas import PaymentResponse
from src.domains.students.models import Sex, StudentStatus
from src.domains.workouts.schemas import AssignmentResponse


class StudentCreate(BaseModel):
    """Create student request."""

    name: str = Field(min_length=2, max_length=255)
    birth_date: date | None = None
    sex: Sex | None = None
    weight_kg: float | None = Field(None, gt=0, le=400)
    height_cm: float | None = Field(None, gt=0, le=260)
    body_fat_percentage: float | None = Field(None, ge=0, le=100)
    goal: str | None = Field(None, max_length=255)
    start_date: date | None = None
    status: StudentStatus = StudentStatus.ACTIVE
    phone: str | None = Field(None, max_length=50)
    email: EmailStr | None = None
    notes: str | None = None


class StudentUpdate(BaseModel):
    """Update student request. Only provided fields change."""

    name: str | None = Field(None, min_length=2, max_length=255)
    birth_date: date | None = None
    sex: Sex | None = None
    weight_kg: float | None = Field(None, gt=0, le=400)
    height_cm: float | None = Field(None, gt=0, le=260)
    body_fat_percentage: float | None = Field(None, ge=0, le=100)
    goal: str | None = Field(None, max_length=255)
    start_date: date | None = None
    status: StudentStatus | None = None
    phone: str | None = Field(None, max_length=50)
    email: EmailStr | None = None
    notes: str | None = None


class StudentResponse(BaseModel):
    """Student response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    birth_date: date | None = None
    sex: Sex | None = None
    weight_kg: float | None = None
    height_cm: float | None = None
    body_fat_percentage: float | None = None
    goal: str | None = None
    start_date: date | None = None
    status: StudentStatus
    phone: str | None = None
    email: str | None = None
    notes: str | None = None
    created_at: datetime


class StudentOverviewResponse(BaseModel):
    """Everything shown on the student details page."""

    student: StudentResponse
    plan: list[AssignmentResponse] = []
    assessments: list[AssessmentResponse] = []
    payments: list[PaymentResponse] = []
