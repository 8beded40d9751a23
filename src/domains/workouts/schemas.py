"""Workout schemas for request/response validation."""
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from src.domains.students.models import StudentStatus
from src.domains.trainers.schemas import TrainerProfileResponse
from src.domains.workouts.models import MuscleGroup, WorkoutAssignment


# Exercise schemas

class ExerciseResponse(BaseModel):
    """Exercise response."""

    id: UUID
    name: str
    muscle_group: MuscleGroup
    description: str | None = None

    class Config:
        from_attributes = True


# Plan schemas

class PlanItemInput(BaseModel):
    """One entry of a replace-all plan commit."""

    exercise_id: UUID
    sets: int = Field(default=3, ge=1)
    reps: int = Field(default=12, ge=1)
    rest_seconds: int = Field(default=60, ge=1)
    notes: str | None = None


class PlanReplaceRequest(BaseModel):
    """Replace a student's whole plan."""

    items: list[PlanItemInput] = Field(default_factory=list, max_length=50)
    weekly_sessions: int | None = Field(None, ge=1, le=7)


class AssignmentResponse(BaseModel):
    """Workout assignment with exercise details."""

    id: UUID
    student_id: UUID
    exercise_id: UUID
    exercise_name: str | None = None
    student_name: str | None = None
    muscle_group: MuscleGroup | None = None
    position: int
    sets: int
    reps: int
    rest_seconds: int
    weekly_sessions: int
    notes: str | None = None
    created_at: datetime

    @classmethod
    def from_assignment(
        cls,
        assignment: WorkoutAssignment,
        student_name: str | None = None,
    ) -> "AssignmentResponse":
        exercise = assignment.exercise
        return cls(
            id=assignment.id,
            student_id=assignment.student_id,
            exercise_id=assignment.exercise_id,
            exercise_name=exercise.name if exercise else None,
            student_name=student_name,
            muscle_group=exercise.muscle_group if exercise else None,
            position=assignment.position,
            sets=assignment.sets,
            reps=assignment.reps,
            rest_seconds=assignment.rest_seconds,
            weekly_sessions=assignment.weekly_sessions,
            notes=assignment.notes,
            created_at=assignment.created_at,
        )


class PlanResponse(BaseModel):
    """A student's current plan."""

    student_id: UUID
    weekly_sessions: int | None = None
    assignments: list[AssignmentResponse] = []

    @classmethod
    def from_assignments(
        cls,
        student_id: UUID,
        assignments: list[WorkoutAssignment],
    ) -> "PlanResponse":
        return cls(
            student_id=student_id,
            weekly_sessions=assignments[0].weekly_sessions if assignments else None,
            assignments=[AssignmentResponse.from_assignment(a) for a in assignments],
        )


# Single assignment schemas

class AssignmentCreate(BaseModel):
    """Append one exercise to a student's plan."""

    student_id: UUID
    exercise_id: UUID
    sets: int = Field(default=3, ge=1)
    reps: int = Field(default=12, ge=1)
    rest_seconds: int = Field(default=60, ge=1)
    weekly_sessions: int | None = Field(None, ge=1, le=7)
    notes: str | None = None


class AssignmentUpdate(BaseModel):
    """Update one assignment. Only provided fields change."""

    sets: int | None = Field(None, ge=1)
    reps: int | None = Field(None, ge=1)
    rest_seconds: int | None = Field(None, ge=1)
    weekly_sessions: int | None = Field(None, ge=1, le=7)
    notes: str | None = None


# Printable sheet schemas

class SheetStudent(BaseModel):
    """Student summary printed on the sheet header."""

    id: UUID
    name: str
    goal: str | None = None
    status: StudentStatus

    class Config:
        from_attributes = True


class SheetGroup(BaseModel):
    """Assignments of one muscle group."""

    muscle_group: MuscleGroup
    assignments: list[AssignmentResponse] = []


class PlanSheetResponse(BaseModel):
    """Print-ready workout sheet."""

    trainer: TrainerProfileResponse
    student: SheetStudent
    weekly_sessions: int | None = None
    groups: list[SheetGroup] = []
    generated_at: datetime
