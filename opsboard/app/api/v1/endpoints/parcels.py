"""
Parcel API Endpoints.

Owner-scoped parcel CRUD plus carrier status refresh and tracking history.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from opsboard.app.db.session import get_db
from opsboard.app.core.dependencies import get_current_owner_id, get_carrier_client
from opsboard.app.core.exceptions import ParcelNotFound
from opsboard.app.schemas.common import MutationResponse
from opsboard.app.schemas.parcel import ParcelCreate, ParcelUpdate, ParcelResponse
from opsboard.app.schemas.tracking import RefreshStatusResponse, TrackingEvent
from opsboard.app.services.carrier_client import CarrierClient
from opsboard.app.services.parcel_store import ParcelStore
from opsboard.app.services.tracking_refresh import TrackingRefreshService

router = APIRouter(prefix="/parcels", tags=["Parcels"])


@router.get("", response_model=List[ParcelResponse])
async def list_parcels(
    owner_id: int = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db)
):
    """List the caller's parcels, newest first."""
    parcels = await ParcelStore(db).list_for_owner(owner_id)
    return [ParcelResponse.model_validate(p) for p in parcels]


@router.get("/tracking-history", response_model=List[TrackingEvent])
async def get_tracking_history(
    tracking_number: str = Query(..., min_length=1, description="Carrier tracking number"),
    owner_id: int = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
    carrier: CarrierClient = Depends(get_carrier_client)
):
    """
    Fetch the full carrier event history for a tracking number.

    Uses the caller's carrier token when one is saved. Nothing is persisted.
    """
    service = TrackingRefreshService(ParcelStore(db), carrier)
    return await service.tracking_history(tracking_number.strip(), owner_id)


@router.post("", response_model=MutationResponse, status_code=status.HTTP_201_CREATED)
async def create_parcel(
    parcel_data: ParcelCreate,
    owner_id: int = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db)
):
    """Create a parcel; tracking fields stay empty until the first refresh."""
    parcel = await ParcelStore(db).create(owner_id, parcel_data.model_dump())
    return MutationResponse(id=parcel.id)


@router.get("/{parcel_id}", response_model=Optional[ParcelResponse])
async def get_parcel(
    parcel_id: int = Path(..., description="Parcel ID"),
    owner_id: int = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db)
):
    """Get one parcel, or null when the caller has no such parcel."""
    parcel = await ParcelStore(db).get(parcel_id, owner_id)
    if parcel is None:
        return None
    return ParcelResponse.model_validate(parcel)


@router.patch("/{parcel_id}", response_model=MutationResponse)
async def update_parcel(
    parcel_data: ParcelUpdate,
    parcel_id: int = Path(..., description="Parcel ID"),
    owner_id: int = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db)
):
    """Update core parcel fields (only those provided)."""
    update_data = parcel_data.model_dump(exclude_unset=True, exclude_none=True)
    matched = await ParcelStore(db).update(parcel_id, owner_id, update_data)
    if not matched:
        raise ParcelNotFound(parcel_id)
    return MutationResponse(id=parcel_id)


@router.delete("/{parcel_id}", response_model=MutationResponse)
async def delete_parcel(
    parcel_id: int = Path(..., description="Parcel ID"),
    owner_id: int = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db)
):
    deleted = await ParcelStore(db).delete(parcel_id, owner_id)
    if not deleted:
        raise ParcelNotFound(parcel_id)
    return MutationResponse(id=parcel_id)


@router.post("/{parcel_id}/refresh-status", response_model=RefreshStatusResponse)
async def refresh_parcel_status(
    parcel_id: int = Path(..., description="Parcel ID"),
    owner_id: int = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
    carrier: CarrierClient = Depends(get_carrier_client)
):
    """
    Pull the latest carrier status for a parcel.

    Returns every carrier event even when there was nothing to store.
    Fails with 404 for unknown parcels and 502 when the carrier lookup fails.
    """
    service = TrackingRefreshService(ParcelStore(db), carrier)
    return await service.refresh_status(parcel_id, owner_id)
