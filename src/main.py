import structlog
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from scalar_fastapi import get_scalar_api_reference
from sqlalchemy import text

from src.config.database import AsyncSessionLocal, init_db
from src.config.settings import settings
from src.core.observability import init_observability
from src.domains.assessments.router import router as assessments_router
from src.domains.auth.router import router as auth_router
from src.domains.billing.router import router as billing_router
from src.domains.dashboard.router import router as dashboard_router
from src.domains.students.router import router as students_router
from src.domains.trainers.router import router as trainers_router
from src.domains.workouts.router import router as workouts_router

logger = structlog.get_logger(__name__)

# (router, path under API_V1_PREFIX, OpenAPI tag)
API_ROUTERS: list[tuple[APIRouter, str, str]] = [
    (auth_router, "/auth", "Authentication"),
    (dashboard_router, "/dashboard", "Dashboard"),
    (students_router, "/students", "Students"),
    (workouts_router, "/workouts", "Workouts"),
    (assessments_router, "/assessments", "Assessments"),
    (billing_router, "/billing", "Billing"),
    (trainers_router, "/trainers", "Trainers"),
]


async def seed_exercises_if_empty() -> None:
    """Load the default exercise catalog into an empty database."""
    from src.domains.workouts.service import WorkoutService
    from src.scripts.seed_exercises import seed_exercises

    try:
        async with AsyncSessionLocal() as session:
            existing = await WorkoutService(session).count_exercises()
            if existing:
                logger.info("exercise_seed_skipped", existing_count=existing)
                return
            seeded = await seed_exercises(session)
            logger.info("exercises_seeded", count=seeded)
    except Exception as e:
        # Startup continues; the catalog endpoint reports the empty catalog
        logger.warning("exercise_seed_failed", error=str(e), type=type(e).__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info(
        "app_starting",
        app_name=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.APP_ENV,
    )

    try:
        await init_db()
    except Exception as e:
        logger.error("database_init_failed", error=str(e), type=type(e).__name__)
        if settings.is_production:
            raise
    else:
        logger.info("database_initialized")

    if settings.SEED_EXERCISES_ON_STARTUP:
        await seed_exercises_if_empty()

    yield
    logger.info("app_shutting_down", app_name=settings.APP_NAME)


def create_app() -> FastAPI:
    """Build the TrainerDesk API application."""
    init_observability()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Personal trainer client management API",
        version=settings.APP_VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url=None,
        lifespan=lifespan,
        # Trailing slash redirects drop the Authorization header
        redirect_slashes=False,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Idempotency-Key"],
    )

    for router, path, tag in API_ROUTERS:
        app.include_router(router, prefix=f"{settings.API_V1_PREFIX}{path}", tags=[tag])

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {
            "status": "healthy",
            "app": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "environment": settings.APP_ENV,
        }

    @app.get("/health/db", include_in_schema=False)
    async def database_health_check() -> dict[str, str]:
        try:
            async with AsyncSessionLocal() as session:
                await session.execute(text("SELECT 1"))
        except Exception as e:
            logger.warning("database_health_check_failed", error=str(e))
            return {"status": "unhealthy", "database": "unreachable"}
        return {"status": "healthy", "database": "ok"}

    @app.get("/reference", include_in_schema=False)
    async def api_reference():
        return get_scalar_api_reference(
            openapi_url=app.openapi_url,
            title=f"{settings.APP_NAME} API Reference",
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("src.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
