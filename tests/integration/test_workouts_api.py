"""Integration tests for workout API endpoints."""
import uuid
from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.settings import settings
from src.domains.students.models import Student
from src.domains.workouts.models import WorkoutAssignment
from src.domains.workouts.service import WorkoutService

BASE = "/api/v1/workouts"


def plan_url(student_id) -> str:
    return f"{BASE}/students/{student_id}/plan"


# =============================================================================
# Exercise Catalog Tests
# =============================================================================


class TestListExercises:
    """Tests for GET /api/v1/workouts/exercises."""

    async def test_list_ordered_by_group_then_name(
        self, authenticated_client: AsyncClient, exercises: dict[str, Any]
    ):
        response = await authenticated_client.get(f"{BASE}/exercises")

        assert response.status_code == 200
        data = response.json()
        assert len(data) == len(exercises)
        keys = [(e["muscle_group"], e["name"]) for e in data]
        assert keys == sorted(keys)

    async def test_filter_by_muscle_group(
        self, authenticated_client: AsyncClient, exercises: dict[str, Any]
    ):
        response = await authenticated_client.get(f"{BASE}/exercises", params={"muscle_group": "chest"})

        assert response.status_code == 200
        names = [e["name"] for e in response.json()]
        assert names == ["Bench Press", "Incline Dumbbell Press"]

    async def test_search_by_name(
        self, authenticated_client: AsyncClient, exercises: dict[str, Any]
    ):
        response = await authenticated_client.get(f"{BASE}/exercises", params={"search": "press"})

        assert response.status_code == 200
        assert {e["name"] for e in response.json()} == {"Bench Press", "Incline Dumbbell Press"}

    async def test_catalog_failure_returns_503(
        self, authenticated_client: AsyncClient, exercises: dict[str, Any]
    ):
        with patch.object(
            WorkoutService,
            "list_exercises",
            AsyncMock(side_effect=ConnectionError("db down")),
        ):
            response = await authenticated_client.get(f"{BASE}/exercises")

        assert response.status_code == 503

    async def test_requires_authentication(self, client: AsyncClient):
        response = await client.get(f"{BASE}/exercises")

        assert response.status_code == 401

    async def test_get_exercise(
        self, authenticated_client: AsyncClient, exercises: dict[str, Any]
    ):
        squat = exercises["Squat"]

        response = await authenticated_client.get(f"{BASE}/exercises/{squat.id}")

        assert response.status_code == 200
        assert response.json()["name"] == "Squat"

    async def test_get_unknown_exercise(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get(f"{BASE}/exercises/{uuid.uuid4()}")

        assert response.status_code == 404


# =============================================================================
# Plan Tests
# =============================================================================


class TestReplacePlan:
    """Tests for PUT /api/v1/workouts/students/{student_id}/plan."""

    async def test_bench_and_squat_defaults(
        self, authenticated_client: AsyncClient, student, exercises: dict[str, Any]
    ):
        bench, squat = exercises["Bench Press"], exercises["Squat"]

        response = await authenticated_client.put(
            plan_url(student.id),
            json={
                "items": [
                    {"exercise_id": str(bench.id), "sets": 5},
                    {"exercise_id": str(squat.id)},
                ]
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["weekly_sessions"] == 3
        rows = [
            (a["exercise_name"], a["sets"], a["reps"], a["rest_seconds"], a["weekly_sessions"])
            for a in data["assignments"]
        ]
        assert rows == [
            ("Bench Press", 5, 12, 60, 3),
            ("Squat", 3, 12, 60, 3),
        ]

    async def test_replace_then_get(
        self, authenticated_client: AsyncClient, student, exercises: dict[str, Any]
    ):
        first = [{"exercise_id": str(exercises["Bench Press"].id)}, {"exercise_id": str(exercises["Squat"].id)}]
        second = [{"exercise_id": str(exercises["Plank"].id), "notes": "45 seconds"}]

        await authenticated_client.put(plan_url(student.id), json={"items": first})
        response = await authenticated_client.put(
            plan_url(student.id),
            json={"items": second, "weekly_sessions": 4},
        )
        assert response.status_code == 200

        response = await authenticated_client.get(plan_url(student.id))

        assert response.status_code == 200
        data = response.json()
        assert [a["exercise_name"] for a in data["assignments"]] == ["Plank"]
        assert data["assignments"][0]["notes"] == "45 seconds"
        assert data["weekly_sessions"] == 4

    async def test_empty_plan_rejected(
        self, authenticated_client: AsyncClient, student, exercises: dict[str, Any]
    ):
        await authenticated_client.put(
            plan_url(student.id),
            json={"items": [{"exercise_id": str(exercises["Squat"].id)}]},
        )

        response = await authenticated_client.put(plan_url(student.id), json={"items": []})

        assert response.status_code == 422
        # Previous plan untouched
        plan = (await authenticated_client.get(plan_url(student.id))).json()
        assert len(plan["assignments"]) == 1

    @pytest.mark.parametrize(
        "item",
        [
            {"sets": 0},
            {"reps": -1},
            {"rest_seconds": 0},
        ],
    )
    async def test_invalid_numbers_rejected(
        self, authenticated_client: AsyncClient, student, exercises: dict[str, Any], item: dict
    ):
        response = await authenticated_client.put(
            plan_url(student.id),
            json={"items": [{"exercise_id": str(exercises["Squat"].id), **item}]},
        )

        assert response.status_code == 422

    @pytest.mark.parametrize("weekly_sessions", [0, 8])
    async def test_weekly_sessions_out_of_range(
        self, authenticated_client: AsyncClient, student, exercises: dict[str, Any], weekly_sessions: int
    ):
        response = await authenticated_client.put(
            plan_url(student.id),
            json={"items": [{"exercise_id": str(exercises["Squat"].id)}], "weekly_sessions": weekly_sessions},
        )

        assert response.status_code == 422

    async def test_unknown_exercise_rejected(
        self, authenticated_client: AsyncClient, student
    ):
        response = await authenticated_client.put(
            plan_url(student.id),
            json={"items": [{"exercise_id": str(uuid.uuid4())}]},
        )

        assert response.status_code == 422

    async def test_other_trainer_student_not_found(
        self, authenticated_client: AsyncClient, other_student, exercises: dict[str, Any]
    ):
        response = await authenticated_client.put(
            plan_url(other_student.id),
            json={"items": [{"exercise_id": str(exercises["Squat"].id)}]},
        )

        assert response.status_code == 404

    async def test_store_failure_returns_503(
        self, authenticated_client: AsyncClient, student, exercises: dict[str, Any]
    ):
        student_id = student.id
        payload = {"items": [{"exercise_id": str(exercises["Squat"].id)}]}

        failing_insert = AsyncMock(side_effect=IntegrityError("INSERT", {}, Exception("constraint failed")))
        with patch.object(WorkoutService, "_insert_plan", failing_insert):
            response = await authenticated_client.put(plan_url(student_id), json=payload)

        assert response.status_code == 503
        assert "re-fetch to confirm" in response.json()["detail"]

    async def test_transient_error_retried(
        self, authenticated_client: AsyncClient, student, exercises: dict[str, Any]
    ):
        # The retry rolls back the shared session, so keep plain ids
        student_id = student.id
        bench_id = exercises["Bench Press"].id
        calls = 0
        original_insert = WorkoutService._insert_plan

        async def flaky_insert(self, *args, **kwargs):
            nonlocal calls
            calls += 1
            if calls == 1:
                raise OperationalError("INSERT", {}, Exception("database is locked"))
            return await original_insert(self, *args, **kwargs)

        with patch.object(WorkoutService, "_insert_plan", flaky_insert), patch(
            "src.domains.workouts.plan_service.asyncio.sleep", new_callable=AsyncMock
        ):
            response = await authenticated_client.put(
                plan_url(student_id),
                json={"items": [{"exercise_id": str(bench_id)}]},
            )

        assert response.status_code == 200
        assert calls == 2
        data = response.json()
        assert data["student_id"] == str(student_id)
        assert [a["exercise_name"] for a in data["assignments"]] == ["Bench Press"]

    async def test_concurrent_same_key_returns_stored_plan(
        self, authenticated_client: AsyncClient, student, exercises: dict[str, Any]
    ):
        student_id = student.id
        bench_id, squat_id = exercises["Bench Press"].id, exercises["Squat"].id
        headers = {"Idempotency-Key": "commit-race"}

        response = await authenticated_client.put(
            plan_url(student_id),
            json={"items": [{"exercise_id": str(bench_id)}]},
            headers=headers,
        )
        assert response.status_code == 200

        lookups = 0
        original_lookup = WorkoutService.get_plan_commit

        async def stale_lookup(self, *args, **kwargs):
            nonlocal lookups
            lookups += 1
            # First check runs before the other request's ledger row is visible
            if lookups == 1:
                return None
            return await original_lookup(self, *args, **kwargs)

        with patch.object(WorkoutService, "get_plan_commit", stale_lookup):
            response = await authenticated_client.put(
                plan_url(student_id),
                json={"items": [{"exercise_id": str(squat_id)}]},
                headers=headers,
            )

        assert response.status_code == 200
        assert lookups == 2
        assert [a["exercise_name"] for a in response.json()["assignments"]] == ["Bench Press"]
        plan = (await authenticated_client.get(plan_url(student_id))).json()
        assert [a["exercise_name"] for a in plan["assignments"]] == ["Bench Press"]

    async def test_large_values_accepted(
        self, authenticated_client: AsyncClient, student, exercises: dict[str, Any]
    ):
        response = await authenticated_client.put(
            plan_url(student.id),
            json={
                "items": [
                    {"exercise_id": str(exercises["Plank"].id), "sets": 30, "reps": 150, "rest_seconds": 900},
                ]
            },
        )

        assert response.status_code == 200
        item = response.json()["assignments"][0]
        assert (item["sets"], item["reps"], item["rest_seconds"]) == (30, 150, 900)

    async def test_idempotency_key_replay(
        self, authenticated_client: AsyncClient, student, exercises: dict[str, Any]
    ):
        headers = {"Idempotency-Key": "commit-123"}
        first = {"items": [{"exercise_id": str(exercises["Bench Press"].id)}]}
        second = {"items": [{"exercise_id": str(exercises["Squat"].id)}]}

        response = await authenticated_client.put(plan_url(student.id), json=first, headers=headers)
        assert response.status_code == 200

        response = await authenticated_client.put(plan_url(student.id), json=second, headers=headers)

        assert response.status_code == 200
        assert [a["exercise_name"] for a in response.json()["assignments"]] == ["Bench Press"]

    async def test_rate_limited(
        self, authenticated_client: AsyncClient, student, exercises: dict[str, Any]
    ):
        payload = {"items": [{"exercise_id": str(exercises["Squat"].id)}]}

        with patch.object(settings, "PLAN_COMMITS_PER_HOUR", 2):
            for _ in range(2):
                response = await authenticated_client.put(plan_url(student.id), json=payload)
                assert response.status_code == 200

            response = await authenticated_client.put(plan_url(student.id), json=payload)

        assert response.status_code == 429


class TestPlanSheet:
    """Tests for GET /api/v1/workouts/students/{student_id}/plan/sheet."""

    async def test_sheet_groups_by_muscle_group(
        self,
        authenticated_client: AsyncClient,
        trainer: dict[str, Any],
        student,
        exercises: dict[str, Any],
    ):
        items = [
            {"exercise_id": str(exercises["Squat"].id)},
            {"exercise_id": str(exercises["Bench Press"].id)},
            {"exercise_id": str(exercises["Incline Dumbbell Press"].id)},
        ]
        await authenticated_client.put(plan_url(student.id), json={"items": items})

        response = await authenticated_client.get(f"{plan_url(student.id)}/sheet")

        assert response.status_code == 200
        data = response.json()
        assert data["trainer"]["name"] == trainer["name"]
        assert data["student"]["name"] == "Ana Souza"
        assert data["weekly_sessions"] == 3
        groups = {g["muscle_group"]: [a["exercise_name"] for a in g["assignments"]] for g in data["groups"]}
        assert groups == {
            "chest": ["Bench Press", "Incline Dumbbell Press"],
            "legs": ["Squat"],
        }

    async def test_sheet_unknown_student(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get(f"{plan_url(uuid.uuid4())}/sheet")

        assert response.status_code == 404


# =============================================================================
# Single Assignment Tests
# =============================================================================


class TestAssignments:
    """Tests for /api/v1/workouts/assignments."""

    async def test_crud(
        self, authenticated_client: AsyncClient, student, exercises: dict[str, Any]
    ):
        response = await authenticated_client.post(
            f"{BASE}/assignments",
            json={
                "student_id": str(student.id),
                "exercise_id": str(exercises["Barbell Curl"].id),
                "weekly_sessions": 2,
            },
        )
        assert response.status_code == 201
        created = response.json()
        assert created["sets"] == 3
        assert created["weekly_sessions"] == 2

        response = await authenticated_client.put(
            f"{BASE}/assignments/{created['id']}",
            json={"reps": 10, "notes": "Slow negatives"},
        )
        assert response.status_code == 200
        assert response.json()["reps"] == 10
        assert response.json()["notes"] == "Slow negatives"

        response = await authenticated_client.get(f"{BASE}/assignments", params={"student_id": str(student.id)})
        assert [a["id"] for a in response.json()] == [created["id"]]

        response = await authenticated_client.delete(f"{BASE}/assignments/{created['id']}")
        assert response.status_code == 204

        response = await authenticated_client.get(f"{BASE}/assignments/{created['id']}")
        assert response.status_code == 404

    async def test_create_for_other_trainer_student(
        self, authenticated_client: AsyncClient, other_student, exercises: dict[str, Any]
    ):
        response = await authenticated_client.post(
            f"{BASE}/assignments",
            json={"student_id": str(other_student.id), "exercise_id": str(exercises["Squat"].id)},
        )

        assert response.status_code == 404

    async def test_create_with_unknown_exercise(
        self, authenticated_client: AsyncClient, student
    ):
        response = await authenticated_client.post(
            f"{BASE}/assignments",
            json={"student_id": str(student.id), "exercise_id": str(uuid.uuid4())},
        )

        assert response.status_code == 422


@pytest.fixture
async def trainer_workouts(
    db_session: AsyncSession,
    trainer: dict[str, Any],
    student,
    other_student,
    exercises: dict[str, Any],
) -> dict[str, uuid.UUID]:
    """Assignments across two of the trainer's students plus one foreign row."""
    carla = Student(user_id=trainer["id"], name="Carla Dias")
    db_session.add(carla)
    await db_session.flush()

    rows = [
        (student.id, "Bench Press", datetime(2026, 10, 1, tzinfo=timezone.utc)),
        (student.id, "Lat Pulldown", datetime(2026, 10, 2, tzinfo=timezone.utc)),
        (carla.id, "Squat", datetime(2026, 10, 3, tzinfo=timezone.utc)),
        (other_student.id, "Plank", datetime(2026, 10, 4, tzinfo=timezone.utc)),
    ]
    for position, (student_id, exercise_name, created_at) in enumerate(rows):
        db_session.add(
            WorkoutAssignment(
                student_id=student_id,
                exercise_id=exercises[exercise_name].id,
                position=position,
                created_at=created_at,
            )
        )
    await db_session.commit()

    return {"ana": student.id, "carla": carla.id}


class TestAssignmentList:
    """Tests for GET /api/v1/workouts/assignments."""

    async def test_all_students_newest_first(
        self, authenticated_client: AsyncClient, trainer_workouts: dict[str, uuid.UUID]
    ):
        response = await authenticated_client.get(f"{BASE}/assignments")

        assert response.status_code == 200
        rows = [(a["exercise_name"], a["student_name"]) for a in response.json()]
        assert rows == [
            ("Squat", "Carla Dias"),
            ("Lat Pulldown", "Ana Souza"),
            ("Bench Press", "Ana Souza"),
        ]

    async def test_filter_by_student(
        self, authenticated_client: AsyncClient, trainer_workouts: dict[str, uuid.UUID]
    ):
        response = await authenticated_client.get(
            f"{BASE}/assignments", params={"student_id": str(trainer_workouts["ana"])}
        )

        assert response.status_code == 200
        assert [a["exercise_name"] for a in response.json()] == ["Lat Pulldown", "Bench Press"]

    @pytest.mark.parametrize(
        ("search", "expected"),
        [
            ("squat", ["Squat"]),
            ("souza", ["Lat Pulldown", "Bench Press"]),
            ("plank", []),
        ],
    )
    async def test_search_exercise_or_student_name(
        self,
        authenticated_client: AsyncClient,
        trainer_workouts: dict[str, uuid.UUID],
        search: str,
        expected: list[str],
    ):
        response = await authenticated_client.get(f"{BASE}/assignments", params={"search": search})

        assert response.status_code == 200
        assert [a["exercise_name"] for a in response.json()] == expected

    async def test_filter_by_other_trainer_student(
        self, authenticated_client: AsyncClient, other_student
    ):
        response = await authenticated_client.get(
            f"{BASE}/assignments", params={"student_id": str(other_student.id)}
        )

        assert response.status_code == 404
