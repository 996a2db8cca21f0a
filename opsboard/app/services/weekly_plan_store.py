"""
Weekly plan persistence.

Weeks start on Monday; plan dates are normalized to that Monday at
midnight so per-week lookups match regardless of the time sent.
"""

from datetime import datetime, time, timedelta
from typing import Any, Dict, List

from sqlalchemy import select

from opsboard.app.models.weekly_plan import WeeklyPlan
from opsboard.app.services.records import OwnedRecordStore


def week_start(value: datetime) -> datetime:
    """Monday 00:00 of the week containing `value` (timezone dropped)."""
    day = value.date()
    return datetime.combine(day - timedelta(days=day.weekday()), time())


class WeeklyPlanStore(OwnedRecordStore):
    model = WeeklyPlan

    def ordering(self) -> tuple:
        return (WeeklyPlan.week_start_date.desc(), WeeklyPlan.id.asc())

    async def create(self, owner_id: int, fields: Dict[str, Any]) -> WeeklyPlan:
        fields = dict(fields, week_start_date=week_start(fields["week_start_date"]))
        return await super().create(owner_id, fields)

    async def list_for_week(self, owner_id: int, week_start_date: datetime) -> List[WeeklyPlan]:
        """All plans of one week, in insertion order."""
        query = (
            select(WeeklyPlan)
            .where(
                WeeklyPlan.user_id == owner_id,
                WeeklyPlan.week_start_date == week_start(week_start_date),
            )
            .order_by(WeeklyPlan.id.asc())
        )
        return await self._read_all(query)
