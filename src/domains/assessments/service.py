"""Assessment service with database operations."""
import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.assessments.models import Assessment
from src.domains.students.models import Student


class AssessmentService:
    """Service for handling assessment operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_assessment(
        self,
        user_id: uuid.UUID,
        assessment_id: uuid.UUID,
    ) -> Assessment | None:
        """Get an assessment whose student belongs to the trainer."""
        result = await self.db.execute(
            select(Assessment)
            .join(Student, Student.id == Assessment.student_id)
            .where(
                Assessment.id == assessment_id,
                Student.user_id == user_id,
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_assessments(
        self,
        user_id: uuid.UUID,
        student_id: uuid.UUID | None = None,
        newest_first: bool = True,
        limit: int | None = None,
    ) -> list[Assessment]:
        """List the trainer's assessments by assessment date.

        The dashboard and list pages want the newest first; the student page
        charts them in chronological order.
        """
        query = (
            select(Assessment)
            .join(Student, Student.id == Assessment.student_id)
            .where(Student.user_id == user_id)
        )

        if student_id:
            query = query.where(Assessment.student_id == student_id)

        if newest_first:
            query = query.order_by(Assessment.assessed_on.desc(), Assessment.created_at.desc())
        else:
            query = query.order_by(Assessment.assessed_on, Assessment.created_at)

        if limit:
            query = query.limit(limit)

        result = await self.db.execute(query.execution_options(populate_existing=True))
        return list(result.scalars().all())

    async def create_assessment(self, data: dict[str, Any]) -> Assessment:
        """Create an assessment. The caller checks the student belongs to the trainer."""
        assessment = Assessment(**data)
        self.db.add(assessment)
        await self.db.commit()
        return await self._reload(assessment.id)

    async def update_assessment(
        self,
        assessment: Assessment,
        data: dict[str, Any],
    ) -> Assessment:
        for field, value in data.items():
            setattr(assessment, field, value)

        await self.db.commit()
        return await self._reload(assessment.id)

    async def delete_assessment(self, assessment: Assessment) -> None:
        await self.db.delete(assessment)
        await self.db.commit()

    async def _reload(self, assessment_id: uuid.UUID) -> Assessment:
        result = await self.db.execute(
            select(Assessment)
            .where(Assessment.id == assessment_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()
