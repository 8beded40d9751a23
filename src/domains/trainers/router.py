"""Trainer router - the trainer's own profile printed on workout sheets."""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import get_db
from src.domains.auth.dependencies import CurrentUser
from src.domains.trainers.schemas import TrainerProfileResponse, TrainerProfileUpdate
from src.domains.trainers.service import TrainerService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/me/profile", response_model=TrainerProfileResponse)
async def get_my_profile(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TrainerProfileResponse:
    """Get the trainer profile, creating a default one if missing."""
    profile = await TrainerService(db).get_or_create_profile(current_user)
    return TrainerProfileResponse.model_validate(profile)


@router.put("/me/profile", response_model=TrainerProfileResponse)
async def update_my_profile(
    request: TrainerProfileUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TrainerProfileResponse:
    """Create or update the trainer profile."""
    profile = await TrainerService(db).update_profile(
        current_user,
        request.model_dump(exclude_unset=True),
    )
    logger.info("Updated trainer profile for %s", current_user.id)
    return TrainerProfileResponse.model_validate(profile)
