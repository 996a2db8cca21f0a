"""
Dashboard schemas.
"""

from pydantic import BaseModel
from typing import List
from opsboard.app.schemas.parcel import ParcelResponse


class DashboardSummary(BaseModel):
    """Counts shown on the dashboard page."""
    total_parcels: int
    delivered_count: int
    customs_clearance_count: int
    in_transit_count: int
    recent_parcels: List[ParcelResponse]
