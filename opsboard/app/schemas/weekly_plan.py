"""
Weekly plan schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from opsboard.app.models.enums import DayOfWeek


class WeeklyPlanCreate(BaseModel):
    week_start_date: datetime
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    day_of_week: DayOfWeek
    start_time: Optional[str] = Field(None, max_length=10, description="e.g. 09:00")
    end_time: Optional[str] = Field(None, max_length=10, description="e.g. 17:30")


class WeeklyPlanUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    day_of_week: Optional[DayOfWeek] = None
    start_time: Optional[str] = Field(None, max_length=10)
    end_time: Optional[str] = Field(None, max_length=10)
    is_completed: Optional[bool] = None


class WeeklyPlanResponse(BaseModel):
    id: int
    user_id: int
    week_start_date: datetime
    title: str
    description: Optional[str]
    day_of_week: DayOfWeek
    start_time: Optional[str]
    end_time: Optional[str]
    is_completed: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
