"""Exercise-related service operations."""
import uuid

from sqlalchemy import String, cast, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.workouts.models import Exercise, MuscleGroup


class ExerciseServiceMixin:
    """Mixin providing exercise catalog operations for WorkoutService."""

    db: AsyncSession

    async def get_exercise_by_id(self, exercise_id: uuid.UUID) -> Exercise | None:
        """Get an exercise by ID."""
        result = await self.db.execute(
            select(Exercise).where(Exercise.id == exercise_id)
        )
        return result.scalar_one_or_none()

    async def get_exercises_by_ids(
        self,
        exercise_ids: set[uuid.UUID],
    ) -> dict[uuid.UUID, Exercise]:
        """Fetch several exercises at once, keyed by ID. Missing IDs are absent."""
        if not exercise_ids:
            return {}
        result = await self.db.execute(
            select(Exercise).where(Exercise.id.in_(exercise_ids))
        )
        return {e.id: e for e in result.scalars().all()}

    async def list_exercises(
        self,
        muscle_group: MuscleGroup | None = None,
        search: str | None = None,
    ) -> list[Exercise]:
        """List the catalog ordered by muscle group, then name."""
        query = select(Exercise)

        if muscle_group:
            query = query.where(Exercise.muscle_group == muscle_group)

        if search:
            query = query.where(Exercise.name.ilike(f"%{search}%"))

        # PostgreSQL sorts enums by declaration order; cast so every backend sorts by label
        query = query.order_by(cast(Exercise.muscle_group, String), Exercise.name)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count_exercises(self) -> int:
        result = await self.db.execute(select(func.count(Exercise.id)))
        return result.scalar() or 0
