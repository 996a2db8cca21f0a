"""
Carrier tracking schemas.

Mirrors the Thailand Post track API payload. Only the fields the refresh
pipeline reads are required to be present; everything else is optional.
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any


class TrackingEvent(BaseModel):
    """One carrier-reported milestone for a shipment."""
    barcode: str
    status: Optional[str] = None
    status_description: Optional[str] = None
    status_detail: Optional[str] = None
    status_date: Optional[str] = None
    location: Optional[str] = None
    postcode: Optional[str] = None
    delivery_status: Optional[str] = None
    delivery_description: Optional[str] = None
    delivery_datetime: Optional[str] = None
    receiver_name: Optional[str] = None
    signature: Optional[str] = None
    delivery_officer_name: Optional[str] = None
    delivery_officer_tel: Optional[str] = None
    office_name: Optional[str] = None
    office_tel: Optional[str] = None
    call_center_tel: Optional[str] = None

    class Config:
        coerce_numbers_to_str = True


class CarrierTrackRequest(BaseModel):
    """Request body sent to the carrier."""
    status: str = "all"
    language: str = "EN"
    barcode: List[str] = Field(..., min_length=1)


class CarrierTrackResult(BaseModel):
    items: Dict[str, List[TrackingEvent]]
    track_count: Optional[Dict[str, Any]] = None


class CarrierTrackResponse(BaseModel):
    """Response envelope returned by the carrier."""
    status: bool
    message: Optional[str] = None
    response: Optional[CarrierTrackResult] = None


class RefreshStatusResponse(BaseModel):
    """Result of refreshing one parcel's status."""
    success: bool = True
    updated: bool
    tracking_items: List[TrackingEvent]


class ConnectionTestResponse(BaseModel):
    success: bool
    carrier_api: bool
    message: str
