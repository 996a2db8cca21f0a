"""
Carrier Client for the Thailand Post track API.

Issues one lookup per tracking number and normalizes the reply into an
ordered list of TrackingEvent (oldest first, as the carrier sends them).
"""

import re
import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

import httpx
from pydantic import ValidationError

from opsboard.app.core.exceptions import TrackingFetchFailed
from opsboard.app.schemas.tracking import CarrierTrackRequest, CarrierTrackResponse, TrackingEvent

logger = logging.getLogger("opsboard.carrier")

# Buddhist-era years are 543 ahead of the Gregorian calendar
BUDDHIST_ERA_OFFSET = 543

_CARRIER_DATE = re.compile(
    r"^(?P<day>\d{1,2})/(?P<month>\d{1,2})/(?P<year>\d{4})"
    r"(?:\s+(?P<hour>\d{1,2}):(?P<minute>\d{2})(?::(?P<second>\d{2}))?)?"
    r"\s*(?P<offset>[+-]\d{2}:?\d{2})?$"
)


def parse_status_date(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a carrier event timestamp.

    Accepts ISO-8601 and the carrier's "DD/MM/YYYY HH:MM:SS+07:00" form,
    where the year may be Buddhist-era. Returns None when unparsable.
    """
    if not value:
        return None
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"

    try:
        return datetime.fromisoformat(value)
    except ValueError:
        pass

    match = _CARRIER_DATE.match(value)
    if not match:
        return None

    year = int(match["year"])
    if year > 2400:
        year -= BUDDHIST_ERA_OFFSET

    tzinfo = None
    if match["offset"]:
        offset = match["offset"].replace(":", "")
        sign = -1 if offset[0] == "-" else 1
        tzinfo = timezone(sign * timedelta(hours=int(offset[1:3]), minutes=int(offset[3:5])))

    try:
        return datetime(
            year,
            int(match["month"]),
            int(match["day"]),
            int(match["hour"] or 0),
            int(match["minute"] or 0),
            int(match["second"] or 0),
            tzinfo=tzinfo,
        )
    except ValueError:
        return None


class CarrierClient:
    """
    Thin async client over the carrier's tracking endpoint.

    Every call is a fresh round trip: no retries, no caching.
    """

    def __init__(
        self,
        api_url: str,
        default_token: str = "",
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ):
        self.api_url = api_url
        self.default_token = default_token
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _headers(self, token: Optional[str]) -> dict:
        headers = {"Content-Type": "application/json"}
        token = token or self.default_token
        if token:
            # The carrier expects "Token <jwt>"; accept tokens stored either way
            headers["Authorization"] = token if " " in token.strip() else f"Token {token.strip()}"
        return headers

    async def fetch_tracking(self, tracking_number: str, token: Optional[str] = None) -> List[TrackingEvent]:
        """
        Fetch all tracking events for one barcode.

        Args:
            tracking_number: Carrier barcode to look up
            token: Optional override credential (falls back to the default)

        Returns:
            Events oldest first; empty when the carrier has nothing yet

        Raises:
            TrackingFetchFailed: transport error, non-success status, or bad body
        """
        body = CarrierTrackRequest(barcode=[tracking_number]).model_dump()

        try:
            response = await self._client.post(self.api_url, json=body, headers=self._headers(token))
        except httpx.HTTPError as e:
            logger.warning("Carrier request failed for %s: %s", tracking_number, e)
            raise TrackingFetchFailed(tracking_number, "network") from e

        if not response.is_success:
            logger.warning("Carrier returned HTTP %s for %s", response.status_code, tracking_number)
            raise TrackingFetchFailed(tracking_number, "http_status")

        try:
            payload = CarrierTrackResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.warning("Malformed carrier response for %s: %s", tracking_number, e)
            raise TrackingFetchFailed(tracking_number, "malformed") from e

        if not payload.status:
            logger.info("Carrier reported no result for %s: %s", tracking_number, payload.message)
            return []

        if payload.response is None:
            logger.warning("Carrier response for %s has no items", tracking_number)
            raise TrackingFetchFailed(tracking_number, "malformed")

        return payload.response.items.get(tracking_number, [])
