"""Student models for the TrainerDesk platform."""
import enum
import uuid
from datetime import date

from sqlalchemy import Date, Enum, Float, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.config.database import Base
from src.core.models import TimestampMixin, UUIDMixin


class Sex(str, enum.Enum):
    """Student sex options."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class StudentStatus(str, enum.Enum):
    """Student lifecycle status."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    DELINQUENT = "delinquent"  # Behind on payments


class Student(Base, UUIDMixin, TimestampMixin):
    """A client of the trainer."""

    __tablename__ = "students"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    birth_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    sex: Mapped[Sex | None] = mapped_column(
        Enum(Sex, name="sex_enum", values_callable=lambda x: [e.value for e in x]),
        nullable=True,
    )
    weight_kg: Mapped[float | None] = mapped_column(Float, nullable=True)
    height_cm: Mapped[float | None] = mapped_column(Float, nullable=True)
    body_fat_percentage: Mapped[float | None] = mapped_column(Float, nullable=True)
    goal: Mapped[str | None] = mapped_column(String(255), nullable=True)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[StudentStatus] = mapped_column(
        Enum(StudentStatus, name="student_status_enum", values_callable=lambda x: [e.value for e in x]),
        default=StudentStatus.ACTIVE,
        nullable=False,
        index=True,
    )
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    trainer: Mapped["User"] = relationship("User")
    assignments: Mapped[list["WorkoutAssignment"]] = relationship(
        "WorkoutAssignment",
        back_populates="student",
        passive_deletes=True,  # Let DB handle CASCADE DELETE
    )

    def __repr__(self) -> str:
        return f"<Student {self.name}>"


# Import for type hints
from src.domains.users.models import User  # noqa: E402, F401
