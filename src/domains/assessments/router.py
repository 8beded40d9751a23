"""Assessment endpoints."""
import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import get_db
from src.domains.assessments.schemas import (
    AssessmentCreate,
    AssessmentResponse,
    AssessmentUpdate,
)
from src.domains.assessments.service import AssessmentService
from src.domains.auth.dependencies import CurrentUser
from src.domains.students.service import StudentService

logger = logging.getLogger(__name__)

router = APIRouter()


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Assessment not found",
    )


@router.get("", response_model=list[AssessmentResponse])
async def list_assessments(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    student_id: Annotated[UUID | None, Query()] = None,
) -> list[AssessmentResponse]:
    """List assessments, newest first."""
    assessments = await AssessmentService(db).list_assessments(
        user_id=current_user.id,
        student_id=student_id,
    )
    return [AssessmentResponse.from_assessment(a) for a in assessments]


@router.post("", response_model=AssessmentResponse, status_code=status.HTTP_201_CREATED)
async def create_assessment(
    request: AssessmentCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AssessmentResponse:
    """Record a physical assessment."""
    student = await StudentService(db).get_student(current_user.id, request.student_id)
    if not student:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Student not found",
        )

    assessment = await AssessmentService(db).create_assessment(request.model_dump())
    return AssessmentResponse.from_assessment(assessment)


@router.get("/{assessment_id}", response_model=AssessmentResponse)
async def get_assessment(
    assessment_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AssessmentResponse:
    """Get assessment details."""
    assessment = await AssessmentService(db).get_assessment(current_user.id, assessment_id)
    if not assessment:
        raise _not_found()
    return AssessmentResponse.from_assessment(assessment)


@router.put("/{assessment_id}", response_model=AssessmentResponse)
async def update_assessment(
    assessment_id: UUID,
    request: AssessmentUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AssessmentResponse:
    """Update an assessment. Only fields present in the body change."""
    assessment_service = AssessmentService(db)
    assessment = await assessment_service.get_assessment(current_user.id, assessment_id)
    if not assessment:
        raise _not_found()

    data = request.model_dump(exclude_unset=True)
    if data.get("assessed_on", ...) is None:
        del data["assessed_on"]

    updated = await assessment_service.update_assessment(assessment, data)
    return AssessmentResponse.from_assessment(updated)


@router.delete("/{assessment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_assessment(
    assessment_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """Delete an assessment."""
    assessment_service = AssessmentService(db)
    assessment = await assessment_service.get_assessment(current_user.id, assessment_id)
    if not assessment:
        raise _not_found()

    await assessment_service.delete_assessment(assessment)
    logger.info("Deleted assessment %s for trainer %s", assessment_id, current_user.id)
