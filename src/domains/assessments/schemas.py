"""Assessment schemas for request/response validation."""
from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field

from src.domains.assessments.models import Assessment


class AssessmentCreate(BaseModel):
    """Create assessment request."""

    student_id: UUID
    assessed_on: date
    weight_kg: float | None = Field(None, gt=0, le=400)
    body_fat_percentage: float | None = Field(None, ge=0, le=100)
    bench_press_max_kg: float | None = Field(None, ge=0, le=600)
    squat_max_kg: float | None = Field(None, ge=0, le=600)
    notes: str | None = None


class AssessmentUpdate(BaseModel):
    """Update assessment request. Only provided fields change."""

    assessed_on: date | None = None
    weight_kg: float | None = Field(None, gt=0, le=400)
    body_fat_percentage: float | None = Field(None, ge=0, le=100)
    bench_press_max_kg: float | None = Field(None, ge=0, le=600)
    squat_max_kg: float | None = Field(None, ge=0, le=600)
    notes: str | None = None


class AssessmentResponse(BaseModel):
    """Assessment response."""

    id: UUID
    student_id: UUID
    student_name: str
    assessed_on: date
    weight_kg: float | None = None
    body_fat_percentage: float | None = None
    bench_press_max_kg: float | None = None
    squat_max_kg: float | None = None
    notes: str | None = None
    created_at: datetime

    @classmethod
    def from_assessment(cls, assessment: Assessment) -> "AssessmentResponse":
        return cls(
            id=assessment.id,
            student_id=assessment.student_id,
            student_name=assessment.student.name if assessment.student else "Unknown",
            assessed_on=assessment.assessed_on,
            weight_kg=assessment.weight_kg,
            body_fat_percentage=assessment.body_fat_percentage,
            bench_press_max_kg=assessment.bench_press_max_kg,
            squat_max_kg=assessment.squat_max_kg,
            notes=assessment.notes,
            created_at=assessment.created_at,
        )
