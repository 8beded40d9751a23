"""Integration tests for student and trainer profile endpoints."""
import uuid
from datetime import date
from typing import Any

from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.assessments.models import Assessment
from src.domains.billing.models import Payment, PaymentStatus
from src.domains.workouts.models import WorkoutAssignment

BASE = "/api/v1/students"


class TestStudentCrud:
    """Tests for /api/v1/students."""

    async def test_create_and_list(self, authenticated_client: AsyncClient, student):
        response = await authenticated_client.post(
            BASE,
            json={
                "name": "Carla Dias",
                "email": "carla@example.com",
                "sex": "female",
                "goal": "Weight loss",
            },
        )

        assert response.status_code == 201
        created = response.json()
        assert created["status"] == "active"

        response = await authenticated_client.get(BASE)
        assert [s["name"] for s in response.json()] == ["Ana Souza", "Carla Dias"]

    async def test_search_and_status_filter(self, authenticated_client: AsyncClient, student):
        await authenticated_client.post(BASE, json={"name": "Diego Alves", "status": "delinquent"})

        response = await authenticated_client.get(BASE, params={"search": "11999"})
        assert [s["name"] for s in response.json()] == ["Ana Souza"]

        response = await authenticated_client.get(BASE, params={"status": "delinquent"})
        assert [s["name"] for s in response.json()] == ["Diego Alves"]

    async def test_other_trainers_students_hidden(
        self, authenticated_client: AsyncClient, other_student
    ):
        other_id = other_student.id

        assert (await authenticated_client.get(BASE)).json() == []
        assert (await authenticated_client.get(f"{BASE}/{other_id}")).status_code == 404
        assert (await authenticated_client.put(f"{BASE}/{other_id}", json={"goal": "x"})).status_code == 404
        assert (await authenticated_client.delete(f"{BASE}/{other_id}")).status_code == 404

    async def test_partial_update(self, authenticated_client: AsyncClient, student):
        response = await authenticated_client.put(
            f"{BASE}/{student.id}",
            json={"status": "inactive", "weight_kg": 61.5},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "inactive"
        assert data["weight_kg"] == 61.5
        assert data["goal"] == "Hypertrophy"

    async def test_invalid_email_rejected(self, authenticated_client: AsyncClient):
        response = await authenticated_client.post(BASE, json={"name": "Eva", "email": "not-an-email"})

        assert response.status_code == 422

    async def test_delete_cascades(
        self,
        authenticated_client: AsyncClient,
        db_session: AsyncSession,
        student,
        exercises: dict[str, Any],
    ):
        student_id = student.id
        await authenticated_client.put(
            f"/api/v1/workouts/students/{student_id}/plan",
            json={"items": [{"exercise_id": str(exercises["Squat"].id)}]},
        )
        db_session.add(Payment(student_id=student_id, amount_cents=15000, reference_month="2026-10"))
        db_session.add(Assessment(student_id=student_id, assessed_on=date(2026, 10, 1), weight_kg=60))
        await db_session.commit()

        response = await authenticated_client.delete(f"{BASE}/{student_id}")

        assert response.status_code == 204
        for model in (WorkoutAssignment, Payment, Assessment):
            result = await db_session.execute(
                select(func.count()).select_from(model).where(model.student_id == student_id)
            )
            assert result.scalar() == 0


class TestStudentOverview:
    """Tests for GET /api/v1/students/{student_id}/overview."""

    async def test_overview(
        self,
        authenticated_client: AsyncClient,
        db_session: AsyncSession,
        student,
        exercises: dict[str, Any],
    ):
        student_id = student.id
        await authenticated_client.put(
            f"/api/v1/workouts/students/{student_id}/plan",
            json={"items": [{"exercise_id": str(exercises["Bench Press"].id)}]},
        )
        db_session.add_all(
            [
                Assessment(student_id=student_id, assessed_on=date(2026, 9, 1), weight_kg=62),
                Assessment(student_id=student_id, assessed_on=date(2026, 6, 1), weight_kg=64),
                Payment(
                    student_id=student_id,
                    amount_cents=15000,
                    reference_month="2026-09",
                    status=PaymentStatus.PAID,
                ),
            ]
        )
        await db_session.commit()

        response = await authenticated_client.get(f"{BASE}/{student_id}/overview")

        assert response.status_code == 200
        data = response.json()
        assert data["student"]["name"] == "Ana Souza"
        assert [a["exercise_name"] for a in data["plan"]] == ["Bench Press"]
        assert [a["assessed_on"] for a in data["assessments"]] == ["2026-06-01", "2026-09-01"]
        assert [p["reference_month"] for p in data["payments"]] == ["2026-09"]

    async def test_overview_unknown_student(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get(f"{BASE}/{uuid.uuid4()}/overview")

        assert response.status_code == 404


class TestTrainerProfile:
    """Tests for /api/v1/trainers/me/profile."""

    async def test_default_profile_from_account(
        self, authenticated_client: AsyncClient, trainer: dict[str, Any]
    ):
        response = await authenticated_client.get("/api/v1/trainers/me/profile")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == trainer["name"]
        assert data["email"] == trainer["email"]
        assert data["registration"] is None

    async def test_update_profile(self, authenticated_client: AsyncClient):
        response = await authenticated_client.put(
            "/api/v1/trainers/me/profile",
            json={"name": None, "registration": "012345-G/SP", "phone": "1133334444"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Test Trainer"
        assert data["registration"] == "012345-G/SP"
        assert data["phone"] == "1133334444"
