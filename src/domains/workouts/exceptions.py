"""Workout plan errors raised by the editor and the plan service."""


class PlanError(Exception):
    """Base exception for workout plan errors."""

    pass


class EditorClosedError(PlanError):
    """The editor was already committed or cancelled."""

    pass


class CommitInProgressError(PlanError):
    """A commit is already outstanding for this editor."""

    pass


class EmptyPlanError(PlanError):
    """A replace-all commit needs at least one assignment."""

    def __init__(self):
        super().__init__("Add at least one exercise before saving the plan")


class PlanValidationError(PlanError):
    """One or more draft assignments are malformed.

    ``errors`` maps the draft index (or ``None`` for plan-level problems)
    to a list of messages.
    """

    def __init__(self, errors: dict[int | None, list[str]]):
        self.errors = errors
        parts = []
        for index, messages in errors.items():
            prefix = "plan" if index is None else f"item {index}"
            parts.append(f"{prefix}: {', '.join(messages)}")
        super().__init__("; ".join(parts))


class PlanCommitError(PlanError):
    """The store rejected the replace-all commit.

    The transaction was rolled back, but callers should re-fetch the plan
    before assuming anything about its contents.
    """

    def __init__(self, student_id, attempts: int, cause: Exception | None = None):
        self.student_id = student_id
        self.attempts = attempts
        self.cause = cause
        super().__init__(
            f"Could not save plan for student {student_id} after {attempts} attempt(s); "
            "plan may be inconsistent, re-fetch to confirm"
        )


class CatalogUnavailableError(PlanError):
    """The exercise catalog could not be loaded."""

    pass
