"""Billing models for student monthly payments."""
import enum
import uuid
from datetime import date

from sqlalchemy import CheckConstraint, Date, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.config.database import Base
from src.core.models import TimestampMixin, UUIDMixin


class PaymentStatus(str, enum.Enum):
    """Payment status."""

    PAID = "paid"
    PENDING = "pending"
    OVERDUE = "overdue"


class Payment(Base, UUIDMixin, TimestampMixin):
    """Monthly fee paid (or owed) by a student."""

    __tablename__ = "payments"
    __table_args__ = (
        CheckConstraint("amount_cents > 0", name="ck_payments_amount_positive"),
    )

    student_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    payment_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Amount in cents to avoid float issues
    amount_cents: Mapped[int] = mapped_column(Integer, nullable=False)

    status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus, name="payment_status_enum", values_callable=lambda x: [e.value for e in x]),
        default=PaymentStatus.PENDING,
        nullable=False,
        index=True,
    )
    reference_month: Mapped[str] = mapped_column(String(7), nullable=False, index=True)  # YYYY-MM
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    student: Mapped["Student"] = relationship("Student", lazy="joined")

    def __repr__(self) -> str:
        return f"<Payment {self.reference_month} {self.amount_cents} ({self.status.value})>"


# Import for type hints
from src.domains.students.models import Student  # noqa: E402, F401
