"""Workouts API, mounted at ``/api/v1/workouts``.

Endpoints live in three modules:
  - exercises_router: the exercise catalog
  - plans_router: a student's plan, its replace-all save and the printable sheet
  - assignments_router: one assignment at a time
"""
from fastapi import APIRouter

from src.domains.workouts.assignments_router import assignments_router
from src.domains.workouts.exercises_router import exercises_router
from src.domains.workouts.plans_router import plans_router

router = APIRouter()

for sub_router in (exercises_router, plans_router, assignments_router):
    router.include_router(sub_router)
