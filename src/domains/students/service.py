"""Student service with database operations.

Every query is scoped by the owning trainer's ``user_id``; a student that
belongs to another trainer is indistinguishable from a missing one.
"""
import uuid
from typing import Any

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.students.models import Student, StudentStatus


class StudentNotFoundError(Exception):
    """Student does not exist or is not owned by the current trainer."""

    def __init__(self, student_id: uuid.UUID):
        super().__init__(f"Student {student_id} not found")
        self.student_id = student_id


class StudentService:
    """Service for handling student operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_student(
        self,
        user_id: uuid.UUID,
        student_id: uuid.UUID,
    ) -> Student | None:
        """Get a student owned by the trainer."""
        result = await self.db.execute(
            select(Student).where(
                Student.id == student_id,
                Student.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def require_student(
        self,
        user_id: uuid.UUID,
        student_id: uuid.UUID,
    ) -> Student:
        """Get a student owned by the trainer or raise StudentNotFoundError."""
        student = await self.get_student(user_id, student_id)
        if student is None:
            raise StudentNotFoundError(student_id)
        return student

    async def list_students(
        self,
        user_id: uuid.UUID,
        search: str | None = None,
        status: StudentStatus | None = None,
    ) -> list[Student]:
        """List the trainer's students ordered by name.

        ``search`` matches name, email or phone.
        """
        query = select(Student).where(Student.user_id == user_id)

        if status:
            query = query.where(Student.status == status)

        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(
                    Student.name.ilike(pattern),
                    Student.email.ilike(pattern),
                    Student.phone.ilike(pattern),
                )
            )

        query = query.order_by(Student.name)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def create_student(
        self,
        user_id: uuid.UUID,
        data: dict[str, Any],
    ) -> Student:
        """Create a student for the trainer."""
        student = Student(user_id=user_id, **data)
        self.db.add(student)
        await self.db.commit()
        await self.db.refresh(student)
        return student

    async def update_student(
        self,
        student: Student,
        data: dict[str, Any],
    ) -> Student:
        """Apply a partial update."""
        for field, value in data.items():
            setattr(student, field, value)

        await self.db.commit()
        await self.db.refresh(student)
        return student

    async def delete_student(self, student: Student) -> None:
        """Delete a student; plan, assessments and payments cascade."""
        await self.db.delete(student)
        await self.db.commit()
