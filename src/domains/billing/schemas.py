"""Billing schemas for API validation."""
from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field

from .models import Payment, PaymentStatus

REFERENCE_MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class PaymentCreate(BaseModel):
    """Schema for creating a payment."""

    student_id: UUID
    payment_date: date | None = None
    amount_cents: int = Field(..., gt=0)
    status: PaymentStatus = PaymentStatus.PENDING
    reference_month: str = Field(..., pattern=REFERENCE_MONTH_PATTERN)
    notes: str | None = None


class PaymentUpdate(BaseModel):
    """Schema for updating a payment."""

    payment_date: date | None = None
    amount_cents: int | None = Field(default=None, gt=0)
    status: PaymentStatus | None = None
    reference_month: str | None = Field(default=None, pattern=REFERENCE_MONTH_PATTERN)
    notes: str | None = None


class MarkPaidRequest(BaseModel):
    """Schema for marking payment as paid."""

    payment_date: date | None = None  # Defaults to today


class PaymentResponse(BaseModel):
    """Schema for payment response."""

    id: UUID
    student_id: UUID
    student_name: str
    payment_date: date | None
    amount_cents: int
    status: PaymentStatus
    reference_month: str
    notes: str | None
    created_at: datetime
    updated_at: datetime | None

    @classmethod
    def from_payment(cls, payment: Payment) -> "PaymentResponse":
        return cls(
            id=payment.id,
            student_id=payment.student_id,
            student_name=payment.student.name if payment.student else "Unknown",
            payment_date=payment.payment_date,
            amount_cents=payment.amount_cents,
            status=payment.status,
            reference_month=payment.reference_month,
            notes=payment.notes,
            created_at=payment.created_at,
            updated_at=payment.updated_at,
        )


class PaymentListResponse(BaseModel):
    """Schema for payment list response."""

    payments: list[PaymentResponse]
    total: int
