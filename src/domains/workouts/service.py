"""Workout service with database operations.

This is the main entry point that composes the workout sub-services via mixins:
- ExerciseServiceMixin: Exercise catalog queries
- PlanServiceMixin: Current plan, replace-all commits and single assignments
"""
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.workouts.exercise_service import ExerciseServiceMixin
from src.domains.workouts.plan_service import PlanServiceMixin


class WorkoutService(ExerciseServiceMixin, PlanServiceMixin):
    """Service for handling workout operations.

    Composes exercise and plan operations via mixins. This is the store the
    plan editor commits through.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
