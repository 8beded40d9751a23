"""Test configuration and fixtures for TrainerDesk API."""

import uuid
from collections.abc import AsyncGenerator
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from src.config.database import Base, enable_sqlite_foreign_keys, get_db
from src.core.redis import clear_memory_store, use_memory_fallback
from src.core.security import create_access_token, hash_password
from src.main import create_app

# Test database URL - use SQLite in-memory for tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_PASSWORD = "secret-password"


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for tests."""
    return "asyncio"


@pytest.fixture(autouse=True)
def memory_redis():
    """Run token blacklist and rate limiting against the in-memory store."""
    use_memory_fallback()
    clear_memory_store()
    yield
    clear_memory_store()


@pytest.fixture(scope="function")
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_foreign_keys(engine)

    # Import all models to register them
    from src.domains import models  # noqa: F401

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture(scope="function")
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session


@pytest.fixture(scope="function")
async def client(test_engine, db_session) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with database session override."""
    app = create_app()

    # Override the database dependency
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


async def _create_trainer(db_session: AsyncSession, name: str, is_active: bool = True) -> dict[str, Any]:
    from src.domains.users.models import User

    user_id = uuid.uuid4()
    user = User(
        id=user_id,
        email=f"{name.lower().replace(' ', '-')}-{user_id}@example.com",
        name=name,
        password_hash=hash_password(TEST_PASSWORD),
        is_active=is_active,
    )
    db_session.add(user)
    await db_session.commit()

    return {
        "id": user_id,
        "email": user.email,
        "name": user.name,
        "password": TEST_PASSWORD,
    }


@pytest.fixture
async def trainer(db_session: AsyncSession) -> dict[str, Any]:
    """Create the signed-in trainer."""
    return await _create_trainer(db_session, "Test Trainer")


@pytest.fixture
async def other_trainer(db_session: AsyncSession) -> dict[str, Any]:
    """Create a second trainer whose data must stay invisible."""
    return await _create_trainer(db_session, "Other Trainer")


@pytest.fixture
async def inactive_trainer(db_session: AsyncSession) -> dict[str, Any]:
    """Create a disabled trainer account."""
    return await _create_trainer(db_session, "Inactive Trainer", is_active=False)


@pytest.fixture
def auth_headers(trainer: dict[str, Any]) -> dict[str, str]:
    """Bearer header for the trainer."""
    token = create_access_token(str(trainer["id"]))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def authenticated_client(
    client: AsyncClient,
    auth_headers: dict[str, str],
) -> AsyncClient:
    """Test client that sends the trainer's bearer token."""
    client.headers.update(auth_headers)
    return client


# =============================================================================
# Domain Data Fixtures
# =============================================================================


@pytest.fixture
async def exercises(db_session: AsyncSession) -> dict[str, Any]:
    """Small catalog keyed by exercise name."""
    from src.domains.workouts.models import Exercise, MuscleGroup

    catalog = [
        ("Bench Press", MuscleGroup.CHEST),
        ("Incline Dumbbell Press", MuscleGroup.CHEST),
        ("Lat Pulldown", MuscleGroup.BACK),
        ("Squat", MuscleGroup.LEGS),
        ("Lateral Raise", MuscleGroup.SHOULDERS),
        ("Barbell Curl", MuscleGroup.ARMS),
        ("Plank", MuscleGroup.ABS),
    ]
    created = {}
    for name, group in catalog:
        exercise = Exercise(name=name, muscle_group=group)
        db_session.add(exercise)
        created[name] = exercise

    await db_session.commit()
    return created


@pytest.fixture
async def student(db_session: AsyncSession, trainer: dict[str, Any]):
    """An active student owned by the trainer."""
    from src.domains.students.models import Student, StudentStatus

    student = Student(
        user_id=trainer["id"],
        name="Ana Souza",
        email="ana@example.com",
        phone="11999990000",
        goal="Hypertrophy",
        status=StudentStatus.ACTIVE,
    )
    db_session.add(student)
    await db_session.commit()
    await db_session.refresh(student)
    return student


@pytest.fixture
async def other_student(db_session: AsyncSession, other_trainer: dict[str, Any]):
    """A student owned by another trainer."""
    from src.domains.students.models import Student

    student = Student(user_id=other_trainer["id"], name="Bruno Lima")
    db_session.add(student)
    await db_session.commit()
    await db_session.refresh(student)
    return student
