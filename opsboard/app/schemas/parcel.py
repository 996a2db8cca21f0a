"""
Parcel Pydantic schemas.

Defines request and response models for parcel management.
"""

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional


def _clean_tracking_number(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("tracking_number must not be blank")
    return value


class ParcelCreate(BaseModel):
    """Schema for creating a new parcel."""
    tracking_number: str = Field(..., min_length=1, max_length=255, description="Carrier tracking number")
    destination: Optional[str] = Field(None, description="Destination country or address")
    recipient_name: Optional[str] = Field(None, description="Recipient name")
    date_sent: Optional[datetime] = Field(None, description="Date the parcel was sent")
    note: Optional[str] = Field(None, description="Free-text note")

    @field_validator("tracking_number")
    @classmethod
    def strip_tracking_number(cls, value: str) -> str:
        return _clean_tracking_number(value)


class ParcelUpdate(BaseModel):
    """Schema for updating the core fields of a parcel."""
    tracking_number: Optional[str] = Field(None, min_length=1, max_length=255)
    destination: Optional[str] = None
    recipient_name: Optional[str] = None
    date_sent: Optional[datetime] = None
    note: Optional[str] = None

    @field_validator("tracking_number")
    @classmethod
    def strip_tracking_number(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _clean_tracking_number(value)


class ParcelResponse(BaseModel):
    """Schema for parcel response."""
    id: int
    user_id: int
    tracking_number: str
    destination: Optional[str]
    recipient_name: Optional[str]
    date_sent: Optional[datetime]
    note: Optional[str]
    current_status: Optional[str]
    current_status_description: Optional[str]
    current_location: Optional[str]
    last_updated: Optional[datetime]
    delivery_status: Optional[str]
    is_delivered: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
