"""Billing service with database operations."""
import uuid
from datetime import date
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.students.models import Student

from .models import Payment, PaymentStatus


class BillingService:
    """Payments are reached through the student, so every query joins on its trainer."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _owned_payments(self, user_id: uuid.UUID):
        return (
            select(Payment)
            .join(Student, Student.id == Payment.student_id)
            .where(Student.user_id == user_id)
        )

    async def get_payment(
        self,
        user_id: uuid.UUID,
        payment_id: uuid.UUID,
    ) -> Payment | None:
        result = await self.db.execute(
            self._owned_payments(user_id)
            .where(Payment.id == payment_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_payments(
        self,
        user_id: uuid.UUID,
        student_id: uuid.UUID | None = None,
        status: PaymentStatus | None = None,
        reference_month: str | None = None,
        limit: int | None = None,
    ) -> list[Payment]:
        """List payments newest first."""
        query = self._owned_payments(user_id)

        if student_id:
            query = query.where(Payment.student_id == student_id)
        if status:
            query = query.where(Payment.status == status)
        if reference_month:
            query = query.where(Payment.reference_month == reference_month)

        query = query.order_by(Payment.created_at.desc(), Payment.reference_month.desc())
        if limit:
            query = query.limit(limit)

        result = await self.db.execute(query.execution_options(populate_existing=True))
        return list(result.scalars().all())

    async def create_payment(self, data: dict[str, Any]) -> Payment:
        """Create a payment. The caller checks the student belongs to the trainer."""
        payment = Payment(**data)
        self.db.add(payment)
        await self.db.commit()
        return await self._reload(payment.id)

    async def update_payment(self, payment: Payment, data: dict[str, Any]) -> Payment:
        for field, value in data.items():
            setattr(payment, field, value)

        await self.db.commit()
        return await self._reload(payment.id)

    async def mark_paid(self, payment: Payment, payment_date: date | None = None) -> Payment:
        """Settle a payment, dating it today unless told otherwise."""
        payment.status = PaymentStatus.PAID
        payment.payment_date = payment_date or date.today()

        await self.db.commit()
        return await self._reload(payment.id)

    async def delete_payment(self, payment: Payment) -> None:
        await self.db.delete(payment)
        await self.db.commit()

    async def paid_revenue_cents(self, user_id: uuid.UUID, reference_month: str) -> int:
        """Sum of paid amounts for one reference month."""
        result = await self.db.execute(
            select(func.coalesce(func.sum(Payment.amount_cents), 0))
            .join(Student, Student.id == Payment.student_id)
            .where(
                Student.user_id == user_id,
                Payment.reference_month == reference_month,
                Payment.status == PaymentStatus.PAID,
            )
        )
        return int(result.scalar() or 0)

    async def _reload(self, payment_id: uuid.UUID) -> Payment:
        result = await self.db.execute(
            select(Payment)
            .where(Payment.id == payment_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()
