"""
Dashboard Service.

Simple read-only counts over an owner's parcels.
"""

from typing import Sequence

from opsboard.app.models.parcel import Parcel
from opsboard.app.schemas.dashboard import DashboardSummary
from opsboard.app.schemas.parcel import ParcelResponse

RECENT_PARCELS_LIMIT = 5
CUSTOMS_MARKER = "customs"


def summarize_parcels(parcels: Sequence[Parcel]) -> DashboardSummary:
    """
    Build dashboard counts from parcels ordered newest first.

    Anything not yet delivered counts as in transit.
    """
    total = len(parcels)
    delivered = sum(1 for p in parcels if p.is_delivered)
    customs = sum(
        1 for p in parcels
        if CUSTOMS_MARKER in (p.current_status_description or "").lower()
    )

    return DashboardSummary(
        total_parcels=total,
        delivered_count=delivered,
        customs_clearance_count=customs,
        in_transit_count=total - delivered,
        recent_parcels=[ParcelResponse.model_validate(p) for p in parcels[:RECENT_PARCELS_LIMIT]],
    )
