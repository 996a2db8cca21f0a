"""
Status resolution over an ordered list of tracking events.

The carrier sends events oldest first, so position decides recency.
"""

from typing import Optional, Sequence

from opsboard.app.schemas.tracking import TrackingEvent

DELIVERED_MARKER = "delivered"


def latest(events: Sequence[TrackingEvent]) -> Optional[TrackingEvent]:
    """Return the most recent event, or None when there are none."""
    if not events:
        return None
    return events[-1]


def is_delivered(events: Sequence[TrackingEvent]) -> bool:
    """
    True when the latest event marks a delivery.

    Either signal is enough: a non-null delivery_status, or "delivered"
    anywhere in the status description (case-insensitive).
    """
    event = latest(events)
    if event is None:
        return False
    if event.delivery_status is not None:
        return True
    return DELIVERED_MARKER in (event.status_description or "").lower()
