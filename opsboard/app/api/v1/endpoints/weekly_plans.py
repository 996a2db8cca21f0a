"""
Weekly Plan API Endpoints.
"""

from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from opsboard.app.db.session import get_db
from opsboard.app.core.dependencies import get_current_owner_id
from opsboard.app.core.exceptions import ResourceNotFoundError
from opsboard.app.schemas.common import MutationResponse
from opsboard.app.schemas.weekly_plan import WeeklyPlanCreate, WeeklyPlanUpdate, WeeklyPlanResponse
from opsboard.app.services.weekly_plan_store import WeeklyPlanStore

router = APIRouter(prefix="/weekly-plans", tags=["Weekly Plans"])


@router.get("", response_model=List[WeeklyPlanResponse])
async def list_weekly_plans(
    owner_id: int = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db)
):
    """All of the caller's plans, latest week first."""
    plans = await WeeklyPlanStore(db).list_for_owner(owner_id)
    return [WeeklyPlanResponse.model_validate(p) for p in plans]


@router.get("/week", response_model=List[WeeklyPlanResponse])
async def list_weekly_plans_for_week(
    week_start_date: datetime = Query(..., description="Any moment within the week"),
    owner_id: int = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db)
):
    plans = await WeeklyPlanStore(db).list_for_week(owner_id, week_start_date)
    return [WeeklyPlanResponse.model_validate(p) for p in plans]


@router.post("", response_model=MutationResponse, status_code=status.HTTP_201_CREATED)
async def create_weekly_plan(
    plan_data: WeeklyPlanCreate,
    owner_id: int = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db)
):
    plan = await WeeklyPlanStore(db).create(owner_id, plan_data.model_dump())
    return MutationResponse(id=plan.id)


@router.get("/{plan_id}", response_model=Optional[WeeklyPlanResponse])
async def get_weekly_plan(
    plan_id: int = Path(..., description="Weekly plan ID"),
    owner_id: int = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db)
):
    plan = await WeeklyPlanStore(db).get(plan_id, owner_id)
    if plan is None:
        return None
    return WeeklyPlanResponse.model_validate(plan)


@router.patch("/{plan_id}", response_model=MutationResponse)
async def update_weekly_plan(
    plan_data: WeeklyPlanUpdate,
    plan_id: int = Path(..., description="Weekly plan ID"),
    owner_id: int = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db)
):
    update_data = plan_data.model_dump(exclude_unset=True, exclude_none=True)
    matched = await WeeklyPlanStore(db).update(plan_id, owner_id, update_data)
    if not matched:
        raise ResourceNotFoundError("Weekly plan", plan_id)
    return MutationResponse(id=plan_id)


@router.delete("/{plan_id}", response_model=MutationResponse)
async def delete_weekly_plan(
    plan_id: int = Path(..., description="Weekly plan ID"),
    owner_id: int = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db)
):
    deleted = await WeeklyPlanStore(db).delete(plan_id, owner_id)
    if not deleted:
        raise ResourceNotFoundError("Weekly plan", plan_id)
    return MutationResponse(id=plan_id)
