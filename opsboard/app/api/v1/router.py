"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from opsboard.app.api.v1.endpoints import auth, parcels, projects, weekly_plans, settings, dashboard

router = APIRouter()

router.include_router(auth.router)
router.include_router(parcels.router)
router.include_router(projects.router)
router.include_router(weekly_plans.router)
router.include_router(settings.router)
router.include_router(dashboard.router)
