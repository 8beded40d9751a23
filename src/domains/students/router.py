"""Student endpoints."""
import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import get_db
from src.domains.assessments.schemas import AssessmentResponse
from src.domains.assessments.service import AssessmentService
from src.domains.auth.dependencies import CurrentUser
from src.domains.billing.schemas import PaymentResponse
from src.domains.billing.service import BillingService
from src.domains.students.models import StudentStatus
from src.domains.students.schemas import (
    StudentCreate,
    StudentOverviewResponse,
    StudentResponse,
    StudentUpdate,
)
from src.domains.students.service import StudentService
from src.domains.workouts.schemas import AssignmentResponse
from src.domains.workouts.service import WorkoutService

logger = logging.getLogger(__name__)

router = APIRouter()


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Student not found",
    )


@router.get("", response_model=list[StudentResponse])
async def list_students(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    search: Annotated[str | None, Query(max_length=100)] = None,
    student_status: Annotated[StudentStatus | None, Query(alias="status")] = None,
) -> list[StudentResponse]:
    """List the trainer's students, optionally filtered."""
    students = await StudentService(db).list_students(
        user_id=current_user.id,
        search=search,
        status=student_status,
    )
    return [StudentResponse.model_validate(s) for s in students]


@router.post("", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
async def create_student(
    request: StudentCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> StudentResponse:
    """Register a new student."""
    student = await StudentService(db).create_student(
        user_id=current_user.id,
        data=request.model_dump(),
    )
    return StudentResponse.model_validate(student)


@router.get("/{student_id}", response_model=StudentResponse)
async def get_student(
    student_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> StudentResponse:
    """Get student details."""
    student = await StudentService(db).get_student(current_user.id, student_id)
    if not student:
        raise _not_found()
    return StudentResponse.model_validate(student)


@router.put("/{student_id}", response_model=StudentResponse)
async def update_student(
    student_id: UUID,
    request: StudentUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> StudentResponse:
    """Update a student. Only fields present in the body change."""
    student_service = StudentService(db)
    student = await student_service.get_student(current_user.id, student_id)
    if not student:
        raise _not_found()

    updated = await student_service.update_student(
        student,
        request.model_dump(exclude_unset=True),
    )
    return StudentResponse.model_validate(updated)


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_student(
    student_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """Delete a student together with plan, assessments and payments."""
    student_service = StudentService(db)
    student = await student_service.get_student(current_user.id, student_id)
    if not student:
        raise _not_found()

    await student_service.delete_student(student)
    logger.info("Deleted student %s for trainer %s", student_id, current_user.id)


@router.get("/{student_id}/overview", response_model=StudentOverviewResponse)
async def get_student_overview(
    student_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> StudentOverviewResponse:
    """Student details page: profile, current plan, assessments and payments."""
    student = await StudentService(db).get_student(current_user.id, student_id)
    if not student:
        raise _not_found()

    plan = await WorkoutService(db).get_plan(student.id)
    assessments = await AssessmentService(db).list_assessments(
        user_id=current_user.id,
        student_id=student.id,
        newest_first=False,
    )
    payments = await BillingService(db).list_payments(
        user_id=current_user.id,
        student_id=student.id,
    )

    return StudentOverviewResponse(
        student=StudentResponse.model_validate(student),
        plan=[AssignmentResponse.from_assignment(a) for a in plan],
        assessments=[AssessmentResponse.from_assessment(a) for a in assessments],
        payments=[PaymentResponse.from_payment(p) for p in payments],
    )
