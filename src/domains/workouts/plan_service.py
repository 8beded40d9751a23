"""Plan-related service operations (current plan, replace-all commits, single assignments)."""
import asyncio
import uuid
from typing import Any

import structlog
from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager, joinedload

from src.config.settings import settings
from src.core.observability import capture_exception
from src.domains.students.models import Student
from src.domains.students.service import StudentService
from src.domains.workouts.editor import DraftAssignment, validate_drafts
from src.domains.workouts.exceptions import PlanCommitError, PlanValidationError
from src.domains.workouts.models import Exercise, PlanCommit, WorkoutAssignment

logger = structlog.get_logger(__name__)


def _is_transient(error: Exception) -> bool:
    """Errors worth retrying: lost connections, lock timeouts, serialization failures."""
    if isinstance(error, OperationalError):
        return True
    return isinstance(error, DBAPIError) and error.connection_invalidated


class PlanServiceMixin:
    """Mixin providing plan operations for WorkoutService."""

    db: AsyncSession

    # Defined on ExerciseServiceMixin: get_exercises_by_ids, get_exercise_by_id

    # Plan operations

    async def get_plan(self, student_id: uuid.UUID) -> list[WorkoutAssignment]:
        """Current plan of a student in display order."""
        result = await self.db.execute(
            select(WorkoutAssignment)
            .where(WorkoutAssignment.student_id == student_id)
            .options(joinedload(WorkoutAssignment.exercise))
            .order_by(WorkoutAssignment.position, WorkoutAssignment.created_at)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def get_plan_commit(
        self,
        student_id: uuid.UUID,
        idempotency_key: str,
    ) -> PlanCommit | None:
        result = await self.db.execute(
            select(PlanCommit).where(
                PlanCommit.student_id == student_id,
                PlanCommit.idempotency_key == idempotency_key,
            )
        )
        return result.scalar_one_or_none()

    async def replace_plan(
        self,
        user_id: uuid.UUID,
        student_id: uuid.UUID,
        drafts: list[DraftAssignment],
        weekly_sessions: int | None = None,
        idempotency_key: str | None = None,
    ) -> list[WorkoutAssignment]:
        """Replace every assignment of the student with ``drafts``.

        The delete and the inserts run in one transaction, so a failure leaves
        the previous plan untouched. Transient database errors are retried up
        to ``PLAN_COMMIT_MAX_ATTEMPTS`` times. When ``idempotency_key`` was
        already committed for this student, the stored plan is returned and
        nothing is written.

        Raises StudentNotFoundError, EmptyPlanError, PlanValidationError or
        PlanCommitError.
        """
        if weekly_sessions is None:
            weekly_sessions = settings.DEFAULT_WEEKLY_SESSIONS

        await StudentService(self.db).require_student(user_id, student_id)
        validate_drafts(drafts, weekly_sessions)

        exercises = await self.get_exercises_by_ids({d.exercise_id for d in drafts})
        missing: dict[int | None, list[str]] = {}
        for index, draft in enumerate(drafts):
            if draft.exercise_id not in exercises:
                missing[index] = [f"exercise {draft.exercise_id} does not exist"]
        if missing:
            raise PlanValidationError(missing)

        max_attempts = max(1, settings.PLAN_COMMIT_MAX_ATTEMPTS)
        attempt = 0
        while True:
            attempt += 1
            try:
                return await self._replace_plan_once(
                    user_id=user_id,
                    student_id=student_id,
                    drafts=drafts,
                    weekly_sessions=weekly_sessions,
                    idempotency_key=idempotency_key,
                )
            except IntegrityError as e:
                await self.db.rollback()
                # A concurrent request with the same key won the race
                if idempotency_key and await self.get_plan_commit(student_id, idempotency_key):
                    logger.info(
                        "plan_commit_deduplicated",
                        student_id=str(student_id),
                        idempotency_key=idempotency_key,
                    )
                    return await self.get_plan(student_id)
                self._log_commit_failure(student_id, attempt, e)
                raise PlanCommitError(student_id, attempt, e) from e
            except SQLAlchemyError as e:
                await self.db.rollback()
                if _is_transient(e) and attempt < max_attempts:
                    logger.warning(
                        "plan_commit_retry",
                        student_id=str(student_id),
                        attempt=attempt,
                        max_attempts=max_attempts,
                        error=str(e),
                    )
                    await asyncio.sleep(settings.PLAN_COMMIT_RETRY_BACKOFF_SECONDS * attempt)
                    continue
                self._log_commit_failure(student_id, attempt, e)
                raise PlanCommitError(student_id, attempt, e) from e

    async def _replace_plan_once(
        self,
        user_id: uuid.UUID,
        student_id: uuid.UUID,
        drafts: list[DraftAssignment],
        weekly_sessions: int,
        idempotency_key: str | None,
    ) -> list[WorkoutAssignment]:
        if idempotency_key:
            existing = await self.get_plan_commit(student_id, idempotency_key)
            if existing is not None:
                logger.info(
                    "plan_commit_deduplicated",
                    student_id=str(student_id),
                    idempotency_key=idempotency_key,
                )
                return await self.get_plan(student_id)

        await self._delete_plan(student_id)
        await self._insert_plan(student_id, drafts, weekly_sessions)

        if idempotency_key:
            self.db.add(
                PlanCommit(
                    student_id=student_id,
                    user_id=user_id,
                    idempotency_key=idempotency_key,
                    assignment_count=len(drafts),
                )
            )

        await self.db.commit()
        logger.info(
            "plan_committed",
            student_id=str(student_id),
            assignments=len(drafts),
            weekly_sessions=weekly_sessions,
        )
        return await self.get_plan(student_id)

    async def _delete_plan(self, student_id: uuid.UUID) -> None:
        await self.db.execute(
            delete(WorkoutAssignment).where(WorkoutAssignment.student_id == student_id)
        )

    async def _insert_plan(
        self,
        student_id: uuid.UUID,
        drafts: list[DraftAssignment],
        weekly_sessions: int,
    ) -> None:
        for position, draft in enumerate(drafts):
            self.db.add(
                WorkoutAssignment(
                    student_id=student_id,
                    exercise_id=draft.exercise_id,
                    position=position,
                    sets=draft.sets,
                    reps=draft.reps,
                    rest_seconds=draft.rest_seconds,
                    weekly_sessions=weekly_sessions,
                    notes=draft.notes,
                )
            )
        await self.db.flush()

    def _log_commit_failure(self, student_id: uuid.UUID, attempts: int, error: Exception) -> None:
        logger.error(
            "plan_commit_failed",
            student_id=str(student_id),
            attempts=attempts,
            error=str(error),
            type=type(error).__name__,
        )
        capture_exception(
            error,
            extra={"student_id": str(student_id), "attempts": attempts},
            tags={"operation": "replace_plan"},
        )

    # Single assignment operations

    async def get_assignment_by_id(self, assignment_id: uuid.UUID) -> WorkoutAssignment | None:
        result = await self.db.execute(
            select(WorkoutAssignment)
            .where(WorkoutAssignment.id == assignment_id)
            .options(joinedload(WorkoutAssignment.exercise))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_assignment(
        self,
        user_id: uuid.UUID,
        assignment_id: uuid.UUID,
    ) -> WorkoutAssignment | None:
        """Get an assignment whose student belongs to the trainer."""
        result = await self.db.execute(
            select(WorkoutAssignment)
            .join(Student, Student.id == WorkoutAssignment.student_id)
            .where(
                WorkoutAssignment.id == assignment_id,
                Student.user_id == user_id,
            )
            .options(joinedload(WorkoutAssignment.exercise))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_assignments(
        self,
        user_id: uuid.UUID,
        student_id: uuid.UUID | None = None,
        search: str | None = None,
    ) -> list[WorkoutAssignment]:
        """List assignments across the trainer's students, newest first.

        ``search`` matches the exercise name or the student name. Raises
        StudentNotFoundError when ``student_id`` is not one of the trainer's.
        """
        query = (
            select(WorkoutAssignment)
            .join(Student, Student.id == WorkoutAssignment.student_id)
            .join(Exercise, Exercise.id == WorkoutAssignment.exercise_id)
            .where(Student.user_id == user_id)
            .options(
                contains_eager(WorkoutAssignment.student),
                contains_eager(WorkoutAssignment.exercise),
            )
        )

        if student_id is not None:
            await StudentService(self.db).require_student(user_id, student_id)
            query = query.where(WorkoutAssignment.student_id == student_id)

        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(
                    Exercise.name.ilike(pattern),
                    Student.name.ilike(pattern),
                )
            )

        query = query.order_by(
            WorkoutAssignment.created_at.desc(),
            WorkoutAssignment.position,
        ).execution_options(populate_existing=True)

        result = await self.db.execute(query)
        return list(result.unique().scalars().all())

    async def create_assignment(
        self,
        user_id: uuid.UUID,
        student_id: uuid.UUID,
        exercise_id: uuid.UUID,
        sets: int = 3,
        reps: int = 12,
        rest_seconds: int = 60,
        weekly_sessions: int | None = None,
        notes: str | None = None,
    ) -> WorkoutAssignment:
        """Append one assignment to the end of a student's plan."""
        await StudentService(self.db).require_student(user_id, student_id)

        if await self.get_exercise_by_id(exercise_id) is None:
            raise PlanValidationError({None: [f"exercise {exercise_id} does not exist"]})

        result = await self.db.execute(
            select(func.max(WorkoutAssignment.position)).where(
                WorkoutAssignment.student_id == student_id
            )
        )
        last_position = result.scalar()

        assignment = WorkoutAssignment(
            student_id=student_id,
            exercise_id=exercise_id,
            position=0 if last_position is None else last_position + 1,
            sets=sets,
            reps=reps,
            rest_seconds=rest_seconds,
            weekly_sessions=weekly_sessions or settings.DEFAULT_WEEKLY_SESSIONS,
            notes=notes,
        )
        self.db.add(assignment)
        await self.db.commit()
        return await self.get_assignment_by_id(assignment.id)

    async def update_assignment(
        self,
        assignment: WorkoutAssignment,
        data: dict[str, Any],
    ) -> WorkoutAssignment:
        """Apply a partial update to one assignment."""
        for field, value in data.items():
            setattr(assignment, field, value)

        await self.db.commit()
        return await self.get_assignment_by_id(assignment.id)

    async def delete_assignment(self, assignment: WorkoutAssignment) -> None:
        await self.db.delete(assignment)
        await self.db.commit()
