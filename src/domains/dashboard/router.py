"""Dashboard endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import get_db
from src.domains.auth.dependencies import CurrentUser
from src.domains.dashboard.schemas import ActivityItem, DashboardStatsResponse
from src.domains.dashboard.service import DashboardService
from src.domains.students.schemas import StudentResponse

router = APIRouter()


@router.get("/stats", response_model=DashboardStatsResponse)
async def get_stats(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DashboardStatsResponse:
    """Student counters and paid revenue for the current month."""
    return await DashboardService(db).get_stats(current_user.id)


@router.get("/recent-activity", response_model=list[ActivityItem])
async def get_recent_activity(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[ActivityItem]:
    """Latest assessments and payments, newest first (at most 5)."""
    return await DashboardService(db).get_recent_activity(current_user.id)


@router.get("/overdue-students", response_model=list[StudentResponse])
async def get_overdue_students(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[StudentResponse]:
    """Students behind on payments."""
    students = await DashboardService(db).get_overdue_students(current_user.id)
    return [StudentResponse.model_validate(s) for s in students]
