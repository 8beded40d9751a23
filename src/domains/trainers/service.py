"""Trainer profile service."""
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.settings import settings
from src.domains.trainers.models import TrainerProfile
from src.domains.users.models import User


class TrainerService:
    """Service for the trainer's own profile."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_profile(self, user: User) -> TrainerProfile | None:
        result = await self.db.execute(
            select(TrainerProfile).where(TrainerProfile.user_id == user.id)
        )
        return result.scalar_one_or_none()

    async def get_or_create_profile(self, user: User) -> TrainerProfile:
        """Return the trainer's profile, creating a default one on first access."""
        profile = await self.get_profile(user)
        if profile is not None:
            return profile

        profile = TrainerProfile(
            user_id=user.id,
            name=user.name or settings.DEFAULT_TRAINER_NAME,
            email=user.email,
        )
        self.db.add(profile)
        await self.db.commit()
        await self.db.refresh(profile)
        return profile

    async def update_profile(self, user: User, data: dict[str, Any]) -> TrainerProfile:
        """Upsert the profile with the provided fields."""
        profile = await self.get_or_create_profile(user)
        for field, value in data.items():
            if field == "name" and not value:
                continue  # name is required
            setattr(profile, field, value)

        await self.db.commit()
        await self.db.refresh(profile)
        return profile
