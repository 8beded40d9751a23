"""Dashboard schemas."""
from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel


class DashboardStatsResponse(BaseModel):
    """Headline counters."""

    total_students: int
    active_students: int
    delinquent_students: int
    monthly_revenue_cents: int
    reference_month: str


class ActivityItem(BaseModel):
    """One entry of the recent activity feed."""

    id: UUID
    type: Literal["assessment", "payment"]
    description: str
    student_id: UUID
    student_name: str
    amount_cents: int | None = None
    date: datetime
