"""
Weekly plan database model.
"""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Boolean, Enum
from sqlalchemy.sql import func
from opsboard.app.db.session import Base
from opsboard.app.models.enums import DayOfWeek


class WeeklyPlan(Base):
    """One scheduled item on a given day of a given week."""
    __tablename__ = "weekly_plans"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    week_start_date = Column(DateTime(timezone=True), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    day_of_week = Column(Enum(DayOfWeek, values_callable=lambda e: [m.value for m in e]), nullable=False)
    start_time = Column(String(10), nullable=True)
    end_time = Column(String(10), nullable=True)
    is_completed = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<WeeklyPlan(id={self.id}, day='{self.day_of_week.value}', title='{self.title}')>"
