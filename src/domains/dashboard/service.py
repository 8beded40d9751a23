"""Dashboard aggregates over the trainer's students, assessments and payments."""
import uuid
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.assessments.models import Assessment
from src.domains.billing.models import Payment
from src.domains.billing.service import BillingService
from src.domains.dashboard.schemas import ActivityItem, DashboardStatsResponse
from src.domains.students.models import Student, StudentStatus

RECENT_PER_SOURCE = 3
RECENT_ACTIVITY_LIMIT = 5


def current_reference_month(today: date | None = None) -> str:
    """Reference month (YYYY-MM) payments are booked against."""
    return (today or date.today()).strftime("%Y-%m")


class DashboardService:
    """Service for dashboard counters and feeds."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_stats(
        self,
        user_id: uuid.UUID,
        reference_month: str | None = None,
    ) -> DashboardStatsResponse:
        reference_month = reference_month or current_reference_month()

        result = await self.db.execute(
            select(Student.status, func.count(Student.id))
            .where(Student.user_id == user_id)
            .group_by(Student.status)
        )
        by_status = {row[0]: row[1] for row in result.all()}

        revenue = await BillingService(self.db).paid_revenue_cents(user_id, reference_month)

        return DashboardStatsResponse(
            total_students=sum(by_status.values()),
            active_students=by_status.get(StudentStatus.ACTIVE, 0),
            delinquent_students=by_status.get(StudentStatus.DELINQUENT, 0),
            monthly_revenue_cents=revenue,
            reference_month=reference_month,
        )

    async def get_recent_activity(self, user_id: uuid.UUID) -> list[ActivityItem]:
        """Latest assessments and payments merged, newest first."""
        assessments = await self.db.execute(
            select(Assessment)
            .join(Student, Student.id == Assessment.student_id)
            .where(Student.user_id == user_id)
            .order_by(Assessment.created_at.desc())
            .limit(RECENT_PER_SOURCE)
            .execution_options(populate_existing=True)
        )
        payments = await self.db.execute(
            select(Payment)
            .join(Student, Student.id == Payment.student_id)
            .where(Student.user_id == user_id)
            .order_by(Payment.created_at.desc())
            .limit(RECENT_PER_SOURCE)
            .execution_options(populate_existing=True)
        )

        items: list[ActivityItem] = []
        for assessment in assessments.scalars().all():
            items.append(
                ActivityItem(
                    id=assessment.id,
                    type="assessment",
                    description=f"Physical assessment - {assessment.student.name}",
                    student_id=assessment.student_id,
                    student_name=assessment.student.name,
                    date=assessment.created_at,
                )
            )
        for payment in payments.scalars().all():
            items.append(
                ActivityItem(
                    id=payment.id,
                    type="payment",
                    description=f"Payment received - {payment.student.name} ({payment.amount_cents / 100:.2f})",
                    student_id=payment.student_id,
                    student_name=payment.student.name,
                    amount_cents=payment.amount_cents,
                    date=payment.created_at,
                )
            )

        items.sort(key=lambda item: item.date, reverse=True)
        return items[:RECENT_ACTIVITY_LIMIT]

    async def get_overdue_students(self, user_id: uuid.UUID) -> list[Student]:
        """Students flagged as delinquent, most recently added first."""
        result = await self.db.execute(
            select(Student)
            .where(
                Student.user_id == user_id,
                Student.status == StudentStatus.DELINQUENT,
            )
            .order_by(Student.created_at.desc())
        )
        return list(result.scalars().all())
