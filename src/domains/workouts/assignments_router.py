"""Single workout assignment endpoints."""
import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import get_db
from src.domains.auth.dependencies import CurrentUser
from src.domains.students.service import StudentNotFoundError
from src.domains.workouts.exceptions import PlanValidationError
from src.domains.workouts.schemas import (
    AssignmentCreate,
    AssignmentResponse,
    AssignmentUpdate,
)
from src.domains.workouts.service import WorkoutService

logger = logging.getLogger(__name__)

assignments_router = APIRouter()


def _assignment_not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Assignment not found",
    )


@assignments_router.get("/assignments", response_model=list[AssignmentResponse])
async def list_assignments(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    student_id: Annotated[UUID | None, Query()] = None,
    search: Annotated[str | None, Query(max_length=100)] = None,
) -> list[AssignmentResponse]:
    """List assignments across all of the trainer's students, newest first.

    Narrow to one student with ``student_id``; ``search`` matches exercise or
    student names.
    """
    try:
        assignments = await WorkoutService(db).list_assignments(
            current_user.id,
            student_id=student_id,
            search=search,
        )
    except StudentNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Student not found",
        ) from e
    return [AssignmentResponse.from_assignment(a, student_name=a.student.name) for a in assignments]


@assignments_router.post("/assignments", response_model=AssignmentResponse, status_code=status.HTTP_201_CREATED)
async def create_assignment(
    request: AssignmentCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AssignmentResponse:
    """Append one exercise to a student's plan."""
    try:
        assignment = await WorkoutService(db).create_assignment(
            user_id=current_user.id,
            **request.model_dump(),
        )
    except StudentNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Student not found",
        ) from e
    except PlanValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        ) from e
    return AssignmentResponse.from_assignment(assignment)


@assignments_router.get("/assignments/{assignment_id}", response_model=AssignmentResponse)
async def get_assignment(
    assignment_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AssignmentResponse:
    """Get assignment details."""
    assignment = await WorkoutService(db).get_assignment(current_user.id, assignment_id)
    if not assignment:
        raise _assignment_not_found()
    return AssignmentResponse.from_assignment(assignment)


@assignments_router.put("/assignments/{assignment_id}", response_model=AssignmentResponse)
async def update_assignment(
    assignment_id: UUID,
    request: AssignmentUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AssignmentResponse:
    """Update one assignment. Only fields present in the body change."""
    workout_service = WorkoutService(db)
    assignment = await workout_service.get_assignment(current_user.id, assignment_id)
    if not assignment:
        raise _assignment_not_found()

    # Required columns cannot be cleared
    data = {
        k: v for k, v in request.model_dump(exclude_unset=True).items()
        if v is not None or k == "notes"
    }
    updated = await workout_service.update_assignment(assignment, data)
    return AssignmentResponse.from_assignment(updated)


@assignments_router.delete("/assignments/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_assignment(
    assignment_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """Remove one assignment from a student's plan."""
    workout_service = WorkoutService(db)
    assignment = await workout_service.get_assignment(current_user.id, assignment_id)
    if not assignment:
        raise _assignment_not_found()

    await workout_service.delete_assignment(assignment)
    logger.info("Deleted assignment %s for trainer %s", assignment_id, current_user.id)
