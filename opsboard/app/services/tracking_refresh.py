"""
Tracking refresh pipeline.

Loads a parcel, asks the carrier for its events, resolves the latest
status and writes the derived fields back in a single update.
"""

import logging
from typing import List, Optional

from opsboard.app.core.exceptions import ParcelNotFound, TrackingFetchFailed
from opsboard.app.schemas.tracking import ConnectionTestResponse, RefreshStatusResponse, TrackingEvent
from opsboard.app.services import status_resolver
from opsboard.app.services.carrier_client import CarrierClient, parse_status_date
from opsboard.app.services.parcel_store import ParcelStore
from opsboard.app.services.settings_store import SettingsStore

logger = logging.getLogger("opsboard.tracking")


class TrackingRefreshService:
    """
    Refresh orchestrator.

    The store and carrier client are passed in; owner_id is an already
    verified, opaque identity.
    """

    def __init__(self, store: ParcelStore, carrier: CarrierClient):
        self.store = store
        self.carrier = carrier

    async def _override_token(self, owner_id: int) -> Optional[str]:
        settings = await self.store.get_settings(owner_id)
        return SettingsStore.override_token(settings)

    async def refresh_status(self, parcel_id: int, owner_id: int) -> RefreshStatusResponse:
        """
        Refresh one parcel from the carrier.

        An empty event list leaves the stored parcel untouched and still
        succeeds. Carrier errors propagate before anything is written.

        Raises:
            ParcelNotFound: no parcel with this (id, owner)
            TrackingFetchFailed: carrier lookup failed
        """
        parcel = await self.store.get(parcel_id, owner_id)
        if parcel is None:
            raise ParcelNotFound(parcel_id)

        token = await self._override_token(owner_id)
        events = await self.carrier.fetch_tracking(parcel.tracking_number, token)

        latest = status_resolver.latest(events)
        delivered = status_resolver.is_delivered(events)

        if latest is None:
            logger.info("No tracking events yet for parcel %s (%s)", parcel_id, parcel.tracking_number)
            return RefreshStatusResponse(updated=False, tracking_items=events)

        await self.store.update(parcel_id, owner_id, {
            "current_status": latest.status,
            "current_status_description": latest.status_description,
            "current_location": latest.location,
            "last_updated": parse_status_date(latest.status_date),
            "delivery_status": latest.delivery_status,
            "is_delivered": delivered,
        })
        logger.info(
            "Parcel %s refreshed: status=%s delivered=%s",
            parcel_id, latest.status, delivered
        )
        return RefreshStatusResponse(updated=True, tracking_items=events)

    async def tracking_history(self, tracking_number: str, owner_id: int) -> List[TrackingEvent]:
        """Raw carrier events for any tracking number; nothing is persisted."""
        token = await self._override_token(owner_id)
        return await self.carrier.fetch_tracking(tracking_number, token)

    async def test_connection(self, owner_id: int, sample_barcode: str) -> ConnectionTestResponse:
        """Probe the carrier with the owner's credentials. Never raises on carrier failure."""
        token = await self._override_token(owner_id)
        try:
            await self.carrier.fetch_tracking(sample_barcode, token)
        except TrackingFetchFailed as e:
            logger.warning("Carrier connection test failed for owner %s: %s", owner_id, e.kind)
            return ConnectionTestResponse(
                success=False,
                carrier_api=False,
                message="Carrier API connection failed"
            )
        return ConnectionTestResponse(success=True, carrier_api=True, message="Connection successful")
