"""Workout models for the TrainerDesk platform."""
import enum
import uuid

from sqlalchemy import (
    CheckConstraint,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.config.database import Base
from src.core.models import TimestampMixin, UUIDMixin


class MuscleGroup(str, enum.Enum):
    """Catalog categories used to filter exercises."""

    CHEST = "chest"
    BACK = "back"
    LEGS = "legs"
    SHOULDERS = "shoulders"
    ARMS = "arms"
    ABS = "abs"


class Exercise(Base, UUIDMixin, TimestampMixin):
    """Exercise reference data. Not edited through the plan editor."""

    __tablename__ = "exercises"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    muscle_group: Mapped[MuscleGroup] = mapped_column(
        Enum(MuscleGroup, name="muscle_group_enum", values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        index=True,
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Exercise {self.name}>"


class WorkoutAssignment(Base, UUIDMixin, TimestampMixin):
    """One exercise entry within a student's plan."""

    __tablename__ = "workout_assignments"
    __table_args__ = (
        CheckConstraint("sets >= 1", name="ck_workout_assignments_sets"),
        CheckConstraint("reps >= 1", name="ck_workout_assignments_reps"),
        CheckConstraint("rest_seconds >= 1", name="ck_workout_assignments_rest"),
        CheckConstraint(
            "weekly_sessions BETWEEN 1 AND 7",
            name="ck_workout_assignments_weekly_sessions",
        ),
    )

    student_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    exercise_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("exercises.id", ondelete="CASCADE"),
        nullable=False,
    )
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)  # Order within the plan
    sets: Mapped[int] = mapped_column(Integer, default=3, nullable=False)
    reps: Mapped[int] = mapped_column(Integer, default=12, nullable=False)
    rest_seconds: Mapped[int] = mapped_column(Integer, default=60, nullable=False)
    weekly_sessions: Mapped[int] = mapped_column(Integer, default=3, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    student: Mapped["Student"] = relationship("Student", back_populates="assignments")
    exercise: Mapped["Exercise"] = relationship("Exercise", lazy="joined")

    def __repr__(self) -> str:
        return f"<WorkoutAssignment student={self.student_id} exercise={self.exercise_id}>"


class PlanCommit(Base, UUIDMixin, TimestampMixin):
    """Ledger of replace-all commits keyed by the client's idempotency key."""

    __tablename__ = "plan_commits"
    __table_args__ = (
        UniqueConstraint("student_id", "idempotency_key", name="uq_plan_commits_student_key"),
    )

    student_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    idempotency_key: Mapped[str] = mapped_column(String(100), nullable=False)
    assignment_count: Mapped[int] = mapped_column(Integer, nullable=False)

    def __repr__(self) -> str:
        return f"<PlanCommit student={self.student_id} key={self.idempotency_key}>"


# Import for type hints
from src.domains.students.models import Student  # noqa: E402, F401
