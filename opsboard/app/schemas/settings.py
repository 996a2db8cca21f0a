"""
User settings schemas.
"""

from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class SettingsUpdate(BaseModel):
    """Partial update; omitted fields keep their stored value."""
    carrier_api_token: Optional[str] = None
    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None
    notifications_enabled: Optional[bool] = None


class SettingsResponse(BaseModel):
    id: int
    user_id: int
    carrier_api_token: Optional[str]
    supabase_url: Optional[str]
    supabase_anon_key: Optional[str]
    notifications_enabled: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
