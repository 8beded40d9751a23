"""Central import of all domain models.

This file imports all models to ensure they are registered with SQLAlchemy's
metadata before any database operations (like creating tables).
"""

# Users domain
from src.domains.users.models import User

# Trainers domain
from src.domains.trainers.models import TrainerProfile

# Students domain
from src.domains.students.models import Sex, Student, StudentStatus

# Workouts domain
from src.domains.workouts.models import (
    Exercise,
    MuscleGroup,
    PlanCommit,
    WorkoutAssignment,
)

# Assessments domain
from src.domains.assessments.models import Assessment

# Billing domain
from src.domains.billing.models import Payment, PaymentStatus

__all__ = [
    # Users
    "User",
    # Trainers
    "TrainerProfile",
    # Students
    "Sex",
    "Student",
    "StudentStatus",
    # Workouts
    "Exercise",
    "MuscleGroup",
    "PlanCommit",
    "WorkoutAssignment",
    # Assessments
    "Assessment",
    # Billing
    "Payment",
    "PaymentStatus",
]
