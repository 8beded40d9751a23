"""Workout plan editor.

Holds an in-memory working copy of a student's plan while the trainer composes
it, then commits the whole list as the student's new plan (replace-all).

Lifecycle::

    OPEN -> EDITING -> COMMITTED
                    -> CANCELLED

Both terminal states close the editor. A failed commit leaves the editor in
EDITING with the drafts intact so the caller can retry.
"""
import enum
import inspect
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable

import structlog

from src.config.settings import settings
from src.domains.workouts.exceptions import (
    CatalogUnavailableError,
    CommitInProgressError,
    EditorClosedError,
    EmptyPlanError,
    PlanCommitError,
    PlanValidationError,
)
from src.domains.workouts.models import Exercise, MuscleGroup, WorkoutAssignment

if TYPE_CHECKING:
    from src.domains.workouts.service import WorkoutService

logger = structlog.get_logger(__name__)

DEFAULT_SETS = 3
DEFAULT_REPS = 12
DEFAULT_REST_SECONDS = 60

NUMERIC_FIELDS = ("sets", "reps", "rest_seconds")
EDITABLE_FIELDS = NUMERIC_FIELDS + ("notes",)

OnSave = Callable[[list[WorkoutAssignment]], Awaitable[None] | None]


class EditorState(str, enum.Enum):
    """Plan editor lifecycle."""

    OPEN = "open"
    EDITING = "editing"
    CANCELLED = "cancelled"
    COMMITTED = "committed"


@dataclass
class DraftAssignment:
    """A not-yet-saved plan entry."""

    exercise_id: uuid.UUID
    sets: Any = DEFAULT_SETS
    reps: Any = DEFAULT_REPS
    rest_seconds: Any = DEFAULT_REST_SECONDS
    notes: str | None = None
    exercise: Exercise | None = field(default=None, repr=False, compare=False)


def _coerce_int(value: Any) -> Any:
    """Best-effort int coercion; returns the value unchanged when impossible."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return value


def validate_drafts(drafts: list[DraftAssignment], weekly_sessions: Any) -> None:
    """Reject empty plans and malformed numeric fields before any write."""
    if not drafts:
        raise EmptyPlanError()

    errors: dict[int | None, list[str]] = {}

    if (
        not isinstance(weekly_sessions, int)
        or isinstance(weekly_sessions, bool)
        or not 1 <= weekly_sessions <= 7
    ):
        errors[None] = ["weekly_sessions must be an integer between 1 and 7"]

    for index, draft in enumerate(drafts):
        for name in NUMERIC_FIELDS:
            value = getattr(draft, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                errors.setdefault(index, []).append(f"{name} must be a positive integer")

    if errors:
        raise PlanValidationError(errors)


class ExerciseCatalog:
    """Exercise list loaded once per editing session.

    Category filtering happens in memory; only ``reload`` hits the store.
    """

    def __init__(self, exercises: list[Exercise] | None = None):
        self.exercises: list[Exercise] = list(exercises or [])
        self.error: Exception | None = None

    @classmethod
    async def load(cls, store: "WorkoutService") -> "ExerciseCatalog":
        catalog = cls()
        await catalog.reload(store)
        return catalog

    async def reload(self, store: "WorkoutService") -> None:
        """(Re)load the catalog. On failure the catalog is empty and ``error`` is set."""
        try:
            self.exercises = await store.list_exercises()
            self.error = None
        except Exception as e:
            logger.warning("exercise_catalog_load_failed", error=str(e), type=type(e).__name__)
            self.exercises = []
            self.error = e

    @property
    def available(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise CatalogUnavailableError("Exercise catalog is unavailable, try again") from self.error

    def filter(self, muscle_group: MuscleGroup | str | None = None) -> list[Exercise]:
        """Exercises in one category; ``None`` or ``"all"`` returns everything."""
        if muscle_group is None or muscle_group == "all":
            return list(self.exercises)
        group = MuscleGroup(muscle_group)
        return [e for e in self.exercises if e.muscle_group == group]

    def get(self, exercise_id: uuid.UUID) -> Exercise | None:
        for exercise in self.exercises:
            if exercise.id == exercise_id:
                return exercise
        return None


class PlanEditor:
    """Composes a complete replacement plan for one student."""

    def __init__(
        self,
        store: "WorkoutService",
        catalog: ExerciseCatalog | None = None,
        on_save: OnSave | None = None,
    ):
        self.store = store
        self.catalog = catalog or ExerciseCatalog()
        self.on_save = on_save
        self.selected: list[DraftAssignment] = []
        self.state = EditorState.OPEN
        self.saving = False

    @classmethod
    async def open(
        cls,
        store: "WorkoutService",
        on_save: OnSave | None = None,
    ) -> "PlanEditor":
        """Open an editor with a freshly loaded catalog."""
        catalog = await ExerciseCatalog.load(store)
        return cls(store, catalog=catalog, on_save=on_save)

    @property
    def is_closed(self) -> bool:
        return self.state in (EditorState.CANCELLED, EditorState.COMMITTED)

    @property
    def can_commit(self) -> bool:
        return not self.is_closed and not self.saving and bool(self.selected)

    def _ensure_open(self) -> None:
        if self.is_closed:
            raise EditorClosedError(f"Editor is {self.state.value}")

    def add_exercise(self, exercise: Exercise) -> DraftAssignment:
        """Append a draft with default sets/reps/rest. Duplicates are allowed."""
        self._ensure_open()
        draft = DraftAssignment(exercise_id=exercise.id, exercise=exercise)
        self.selected.append(draft)
        self.state = EditorState.EDITING
        return draft

    def remove_exercise(self, index: int) -> None:
        """Drop the draft at ``index``. Out-of-range indexes are ignored."""
        self._ensure_open()
        if 0 <= index < len(self.selected):
            del self.selected[index]
            self.state = EditorState.EDITING

    def update_field(self, index: int, field_name: str, value: Any) -> None:
        """Change one field of one draft.

        Numeric fields are coerced to int when possible; anything that is not a
        positive integer is rejected at commit time.
        """
        self._ensure_open()
        if field_name not in EDITABLE_FIELDS:
            raise ValueError(f"Unknown field: {field_name}")
        if not 0 <= index < len(self.selected):
            return

        if field_name in NUMERIC_FIELDS:
            value = _coerce_int(value)
        elif value == "":
            value = None

        setattr(self.selected[index], field_name, value)
        self.state = EditorState.EDITING

    def cancel(self) -> None:
        """Discard the working copy."""
        self._ensure_open()
        self.selected = []
        self.state = EditorState.CANCELLED

    async def commit(
        self,
        user_id: uuid.UUID,
        student_id: uuid.UUID,
        weekly_sessions: int | None = None,
        idempotency_key: str | None = None,
    ) -> list[WorkoutAssignment]:
        """Replace the student's plan with the drafts.

        Raises EmptyPlanError / PlanValidationError before touching the store,
        and PlanCommitError when the store rejects the write.
        """
        self._ensure_open()
        if self.saving:
            raise CommitInProgressError("A save is already in progress")

        if weekly_sessions is None:
            weekly_sessions = settings.DEFAULT_WEEKLY_SESSIONS

        validate_drafts(self.selected, weekly_sessions)

        self.saving = True
        try:
            assignments = await self.store.replace_plan(
                user_id=user_id,
                student_id=student_id,
                drafts=self.selected,
                weekly_sessions=weekly_sessions,
                idempotency_key=idempotency_key,
            )
        except PlanCommitError:
            logger.warning(
                "plan_editor_commit_failed",
                student_id=str(student_id),
                drafts=len(self.selected),
            )
            raise
        finally:
            self.saving = False

        self.state = EditorState.COMMITTED

        if self.on_save is not None:
            result = self.on_save(assignments)
            if inspect.isawaitable(result):
                await result

        return assignments
