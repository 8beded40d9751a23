"""Exercise-related endpoints."""
import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from fastapi import status as http_status
from fastapi.exceptions import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import get_db
from src.domains.auth.dependencies import CurrentUser
from src.domains.workouts.editor import ExerciseCatalog
from src.domains.workouts.exceptions import CatalogUnavailableError
from src.domains.workouts.models import MuscleGroup
from src.domains.workouts.schemas import ExerciseResponse
from src.domains.workouts.service import WorkoutService

logger = logging.getLogger(__name__)

exercises_router = APIRouter()


@exercises_router.get("/exercises", response_model=list[ExerciseResponse])
async def list_exercises(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    muscle_group: Annotated[MuscleGroup | None, Query()] = None,
    search: Annotated[str | None, Query(max_length=100)] = None,
) -> list[ExerciseResponse]:
    """List the exercise catalog ordered by muscle group, then name."""
    catalog = await ExerciseCatalog.load(WorkoutService(db))
    try:
        catalog.raise_for_error()
    except CatalogUnavailableError as e:
        logger.error("Exercise catalog unavailable: %s", e.__cause__)
        raise HTTPException(
            status_code=http_status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        ) from e

    exercises = catalog.filter(muscle_group)
    if search:
        term = search.lower()
        exercises = [e for e in exercises if term in e.name.lower()]

    return [ExerciseResponse.model_validate(e) for e in exercises]


@exercises_router.get("/exercises/{exercise_id}", response_model=ExerciseResponse)
async def get_exercise(
    exercise_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ExerciseResponse:
    """Get exercise details."""
    workout_service = WorkoutService(db)
    exercise = await workout_service.get_exercise_by_id(exercise_id)
    if not exercise:
        raise HTTPException(
            status_code=http_status.HTTP_404_NOT_FOUND,
            detail="Exercise not found",
        )
    return ExerciseResponse.model_validate(exercise)
