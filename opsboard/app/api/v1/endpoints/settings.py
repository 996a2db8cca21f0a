"""
Settings API Endpoints.

Per-user carrier token and client preferences, plus a carrier connection probe.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from opsboard.app.db.session import get_db
from opsboard.app.core.dependencies import get_current_owner_id, get_carrier_client
from opsboard.app.schemas.common import MutationResponse
from opsboard.app.schemas.settings import SettingsUpdate, SettingsResponse
from opsboard.app.schemas.tracking import ConnectionTestResponse
from opsboard.app.services.carrier_client import CarrierClient
from opsboard.app.services.parcel_store import ParcelStore
from opsboard.app.services.settings_store import SettingsStore
from opsboard.app.services.tracking_refresh import TrackingRefreshService

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("", response_model=Optional[SettingsResponse])
async def get_settings(
    owner_id: int = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db)
):
    """The caller's settings, or null when none were saved yet."""
    user_settings = await SettingsStore(db).get_for_owner(owner_id)
    if user_settings is None:
        return None
    return SettingsResponse.model_validate(user_settings)


@router.put("", response_model=MutationResponse)
async def update_settings(
    settings_data: SettingsUpdate,
    owner_id: int = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db)
):
    """Create or update the caller's settings row."""
    user_settings = await SettingsStore(db).upsert(owner_id, settings_data.model_dump(exclude_unset=True))
    return MutationResponse(id=user_settings.id)


@router.get("/test-connection", response_model=ConnectionTestResponse)
async def test_connection(
    request: Request,
    owner_id: int = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
    carrier: CarrierClient = Depends(get_carrier_client)
):
    """Check that the carrier API accepts the caller's token."""
    service = TrackingRefreshService(ParcelStore(db), carrier)
    return await service.test_connection(owner_id, request.app.state.settings.carrier_test_barcode)
