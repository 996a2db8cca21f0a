"""
Per-user settings persistence.
"""

from typing import Any, Dict, Optional

from sqlalchemy import select, update

from opsboard.app.models.user_settings import UserSettings
from opsboard.app.services.records import OwnedRecordStore


class SettingsStore(OwnedRecordStore):
    """One optional row per owner, keyed by user_id rather than id."""

    model = UserSettings

    async def get_for_owner(self, owner_id: int) -> Optional[UserSettings]:
        query = select(UserSettings).where(UserSettings.user_id == owner_id).limit(1)
        return await self._read_one(query)

    async def upsert(self, owner_id: int, fields: Dict[str, Any]) -> UserSettings:
        """Update the owner's row, creating it on first save."""
        existing = await self.get_for_owner(owner_id)
        if existing is None:
            return await self.create(owner_id, fields)

        if fields:
            statement = (
                update(UserSettings)
                .where(UserSettings.user_id == owner_id)
                .values(**fields)
                .execution_options(synchronize_session=False)
            )
            await self._write(statement, "update")
            await self.db.refresh(existing)
        return existing

    @staticmethod
    def override_token(settings: Optional[UserSettings]) -> Optional[str]:
        """The owner's carrier token, or None when unset or blank."""
        if settings is None or not settings.carrier_api_token:
            return None
        token = settings.carrier_api_token.strip()
        return token or None
