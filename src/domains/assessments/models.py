"""Physical assessment models."""
import uuid
from datetime import date

from sqlalchemy import Date, Float, ForeignKey, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.config.database import Base
from src.core.models import TimestampMixin, UUIDMixin


class Assessment(Base, UUIDMixin, TimestampMixin):
    """Body measurements and strength marks taken on one day."""

    __tablename__ = "assessments"

    student_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    assessed_on: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    weight_kg: Mapped[float | None] = mapped_column(Float, nullable=True)
    body_fat_percentage: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Strength marks (1RM)
    bench_press_max_kg: Mapped[float | None] = mapped_column(Float, nullable=True)
    squat_max_kg: Mapped[float | None] = mapped_column(Float, nullable=True)

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    student: Mapped["Student"] = relationship("Student", lazy="joined")

    def __repr__(self) -> str:
        return f"<Assessment {self.student_id} {self.assessed_on}>"


# Import for type hints
from src.domains.students.models import Student  # noqa: E402, F401
