"""
Dashboard API Endpoints.

Read-only parcel counts for the dashboard page.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from opsboard.app.db.session import get_db
from opsboard.app.core.dependencies import get_current_owner_id
from opsboard.app.schemas.dashboard import DashboardSummary
from opsboard.app.services.dashboard import summarize_parcels
from opsboard.app.services.parcel_store import ParcelStore

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/summary", response_model=DashboardSummary)
async def get_dashboard_summary(
    owner_id: int = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db)
):
    """Total, delivered, customs-clearance and in-transit counts plus recent parcels."""
    parcels = await ParcelStore(db).list_for_owner(owner_id)
    return summarize_parcels(parcels)
