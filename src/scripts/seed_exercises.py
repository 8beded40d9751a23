"""
Seed script for populating the exercise catalog.

Run with:
    python -m src.scripts.seed_exercises
    python -m src.scripts.seed_exercises --clear  # Replace existing exercises
"""

import asyncio

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import AsyncSessionLocal, init_db
from src.domains.workouts.models import Exercise, MuscleGroup

logger = structlog.get_logger(__name__)


EXERCISES = [
    # ==================== CHEST ====================
    {
        "name": "Bench Press",
        "muscle_group": MuscleGroup.CHEST,
        "description": "Flat barbell press for overall chest development.",
    },
    {
        "name": "Incline Dumbbell Press",
        "muscle_group": MuscleGroup.CHEST,
        "description": "Press on a 30-45 degree bench to emphasize the upper chest.",
    },
    {
        "name": "Dumbbell Fly",
        "muscle_group": MuscleGroup.CHEST,
        "description": "Wide arc on a flat bench, slight bend in the elbows.",
    },
    {
        "name": "Cable Crossover",
        "muscle_group": MuscleGroup.CHEST,
        "description": "Bring the handles together in front of the chest.",
    },
    {
        "name": "Push-up",
        "muscle_group": MuscleGroup.CHEST,
        "description": "Bodyweight press keeping the trunk rigid.",
    },
    # ==================== BACK ====================
    {
        "name": "Lat Pulldown",
        "muscle_group": MuscleGroup.BACK,
        "description": "Pull the bar to the upper chest with a wide grip.",
    },
    {
        "name": "Seated Cable Row",
        "muscle_group": MuscleGroup.BACK,
        "description": "Row the handle to the abdomen, squeezing the shoulder blades.",
    },
    {
        "name": "Bent-over Barbell Row",
        "muscle_group": MuscleGroup.BACK,
        "description": "Hinge at the hips and row the bar to the lower chest.",
    },
    {
        "name": "Pull-up",
        "muscle_group": MuscleGroup.BACK,
        "description": "Bodyweight pull until the chin clears the bar.",
    },
    {
        "name": "One-arm Dumbbell Row",
        "muscle_group": MuscleGroup.BACK,
        "description": "Supported on a bench, row the dumbbell to the hip.",
    },
    # ==================== LEGS ====================
    {
        "name": "Squat",
        "muscle_group": MuscleGroup.LEGS,
        "description": "Back squat to at least parallel.",
    },
    {
        "name": "Leg Press",
        "muscle_group": MuscleGroup.LEGS,
        "description": "Press the platform without locking the knees.",
    },
    {
        "name": "Romanian Deadlift",
        "muscle_group": MuscleGroup.LEGS,
        "description": "Hip hinge with soft knees for the hamstrings and glutes.",
    },
    {
        "name": "Leg Extension",
        "muscle_group": MuscleGroup.LEGS,
        "description": "Machine knee extension for the quadriceps.",
    },
    {
        "name": "Lying Leg Curl",
        "muscle_group": MuscleGroup.LEGS,
        "description": "Machine knee flexion for the hamstrings.",
    },
    {
        "name": "Standing Calf Raise",
        "muscle_group": MuscleGroup.LEGS,
        "description": "Full range plantar flexion.",
    },
    # ==================== SHOULDERS ====================
    {
        "name": "Overhead Press",
        "muscle_group": MuscleGroup.SHOULDERS,
        "description": "Standing barbell press from the collarbone to lockout.",
    },
    {
        "name": "Lateral Raise",
        "muscle_group": MuscleGroup.SHOULDERS,
        "description": "Raise the dumbbells to shoulder height with straight arms.",
    },
    {
        "name": "Rear Delt Fly",
        "muscle_group": MuscleGroup.SHOULDERS,
        "description": "Bent-over reverse fly for the posterior deltoid.",
    },
    {
        "name": "Upright Row",
        "muscle_group": MuscleGroup.SHOULDERS,
        "description": "Pull the bar to chest height leading with the elbows.",
    },
    # ==================== ARMS ====================
    {
        "name": "Barbell Curl",
        "muscle_group": MuscleGroup.ARMS,
        "description": "Standing curl keeping the elbows at the sides.",
    },
    {
        "name": "Hammer Curl",
        "muscle_group": MuscleGroup.ARMS,
        "description": "Neutral grip dumbbell curl.",
    },
    {
        "name": "Triceps Pushdown",
        "muscle_group": MuscleGroup.ARMS,
        "description": "Cable extension with the upper arms fixed.",
    },
    {
        "name": "Overhead Triceps Extension",
        "muscle_group": MuscleGroup.ARMS,
        "description": "Dumbbell extension behind the head.",
    },
    {
        "name": "Bench Dip",
        "muscle_group": MuscleGroup.ARMS,
        "description": "Bodyweight dip with hands on a bench.",
    },
    # ==================== ABS ====================
    {
        "name": "Crunch",
        "muscle_group": MuscleGroup.ABS,
        "description": "Curl the trunk lifting only the shoulder blades.",
    },
    {
        "name": "Plank",
        "muscle_group": MuscleGroup.ABS,
        "description": "Hold a straight line from head to heels.",
    },
    {
        "name": "Hanging Leg Raise",
        "muscle_group": MuscleGroup.ABS,
        "description": "Raise the legs while hanging from a bar.",
    },
    {
        "name": "Russian Twist",
        "muscle_group": MuscleGroup.ABS,
        "description": "Seated trunk rotation holding a weight.",
    },
]


async def seed_exercises(session: AsyncSession, clear_existing: bool = False) -> int:
    """Insert the default catalog. Returns the number of exercises created."""
    if clear_existing:
        logger.info("clearing_existing_exercises")
        await session.execute(delete(Exercise))
        await session.commit()
    else:
        # Check if exercises already exist
        result = await session.execute(select(Exercise).limit(1))
        if result.scalar_one_or_none():
            logger.info("exercises_already_exist", hint="Use --clear to replace them")
            return 0

    count = 0
    for exercise_data in EXERCISES:
        session.add(
            Exercise(
                name=exercise_data["name"],
                muscle_group=exercise_data["muscle_group"],
                description=exercise_data.get("description"),
            )
        )
        count += 1

    await session.commit()
    return count


async def main():
    """Main function to run the seed."""
    import argparse

    parser = argparse.ArgumentParser(description="Seed exercises database")
    parser.add_argument("--clear", action="store_true", help="Clear existing exercises first")
    args = parser.parse_args()

    logger.info("exercise_seed_script_started", exercises=len(EXERCISES))

    await init_db()
    async with AsyncSessionLocal() as session:
        count = await seed_exercises(session, clear_existing=args.clear)

    if count > 0:
        logger.info("exercises_seeded_successfully", count=count)
    else:
        logger.info("no_exercises_seeded")


if __name__ == "__main__":
    asyncio.run(main())
