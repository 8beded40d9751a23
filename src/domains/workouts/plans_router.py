"""Student plan endpoints: current plan, replace-all commit and printable sheet."""
import logging
from datetime import datetime, timezone
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import get_db
from src.config.settings import settings
from src.core.redis import RateLimiter
from src.domains.auth.dependencies import CurrentUser
from src.domains.students.service import StudentNotFoundError, StudentService
from src.domains.trainers.schemas import TrainerProfileResponse
from src.domains.trainers.service import TrainerService
from src.domains.workouts.editor import PlanEditor
from src.domains.workouts.exceptions import (
    EmptyPlanError,
    PlanCommitError,
    PlanValidationError,
)
from src.domains.workouts.models import MuscleGroup
from src.domains.workouts.schemas import (
    AssignmentResponse,
    PlanReplaceRequest,
    PlanResponse,
    PlanSheetResponse,
    SheetGroup,
    SheetStudent,
)
from src.domains.workouts.service import WorkoutService

logger = logging.getLogger(__name__)

plans_router = APIRouter()


def _student_not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Student not found",
    )


@plans_router.get("/students/{student_id}/plan", response_model=PlanResponse)
async def get_student_plan(
    student_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PlanResponse:
    """Get the student's current plan with exercise details."""
    student = await StudentService(db).get_student(current_user.id, student_id)
    if not student:
        raise _student_not_found()

    assignments = await WorkoutService(db).get_plan(student.id)
    return PlanResponse.from_assignments(student.id, assignments)


@plans_router.put("/students/{student_id}/plan", response_model=PlanResponse)
async def replace_student_plan(
    student_id: UUID,
    request: PlanReplaceRequest,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    idempotency_key: Annotated[str | None, Header(alias="Idempotency-Key", max_length=100)] = None,
) -> PlanResponse:
    """Replace the student's whole plan with the submitted items.

    Every item gets the same ``weekly_sessions`` (3 unless given). Retrying with
    the same ``Idempotency-Key`` returns the stored plan without rewriting it.
    """
    # A retried commit rolls back the request session and expires every loaded object
    user_id = current_user.id

    if settings.RATE_LIMIT_ENABLED:
        is_allowed, current_count = await RateLimiter.check_rate_limit(
            identifier=str(user_id),
            action="plan_commit",
            max_requests=settings.PLAN_COMMITS_PER_HOUR,
            window_seconds=3600,
        )
        if not is_allowed:
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail=(
                    "Plan save limit exceeded, try again later. "
                    f"({current_count}/{settings.PLAN_COMMITS_PER_HOUR} per hour)"
                ),
            )

    workout_service = WorkoutService(db)
    if not await StudentService(db).get_student(user_id, student_id):
        raise _student_not_found()

    exercises = await workout_service.get_exercises_by_ids(
        {item.exercise_id for item in request.items}
    )
    unknown = [str(item.exercise_id) for item in request.items if item.exercise_id not in exercises]
    if unknown:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": "Unknown exercises", "exercise_ids": unknown},
        )

    editor = PlanEditor(workout_service)
    for index, item in enumerate(request.items):
        editor.add_exercise(exercises[item.exercise_id])
        editor.update_field(index, "sets", item.sets)
        editor.update_field(index, "reps", item.reps)
        editor.update_field(index, "rest_seconds", item.rest_seconds)
        editor.update_field(index, "notes", item.notes)

    try:
        assignments = await editor.commit(
            user_id=user_id,
            student_id=student_id,
            weekly_sessions=request.weekly_sessions,
            idempotency_key=idempotency_key,
        )
    except EmptyPlanError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        ) from e
    except PlanValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "message": str(e),
                "errors": {("plan" if k is None else str(k)): v for k, v in e.errors.items()},
            },
        ) from e
    except StudentNotFoundError as e:
        raise _student_not_found() from e
    except PlanCommitError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        ) from e

    logger.info(
        "Trainer %s replaced plan of student %s (%d items)",
        user_id,
        student_id,
        len(assignments),
    )
    return PlanResponse.from_assignments(student_id, assignments)


@plans_router.get("/students/{student_id}/plan/sheet", response_model=PlanSheetResponse)
async def get_student_plan_sheet(
    student_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PlanSheetResponse:
    """Print-ready sheet: trainer header, student summary, plan grouped by muscle group."""
    student = await StudentService(db).get_student(current_user.id, student_id)
    if not student:
        raise _student_not_found()

    assignments = await WorkoutService(db).get_plan(student.id)
    profile = await TrainerService(db).get_or_create_profile(current_user)

    groups: list[SheetGroup] = []
    for muscle_group in MuscleGroup:
        items = [
            AssignmentResponse.from_assignment(a)
            for a in assignments
            if a.exercise and a.exercise.muscle_group == muscle_group
        ]
        if items:
            groups.append(SheetGroup(muscle_group=muscle_group, assignments=items))

    return PlanSheetResponse(
        trainer=TrainerProfileResponse.model_validate(profile),
        student=SheetStudent.model_validate(student),
        weekly_sessions=assignments[0].weekly_sessions if assignments else None,
        groups=groups,
        generated_at=datetime.now(timezone.utc),
    )
