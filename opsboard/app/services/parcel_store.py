"""
Parcel Record Store.

Owner-scoped parcel persistence plus the settings lookup used when
refreshing a parcel's tracking status.
"""

from typing import Optional

from opsboard.app.models.parcel import Parcel
from opsboard.app.models.user_settings import UserSettings
from opsboard.app.services.records import OwnedRecordStore
from opsboard.app.services.settings_store import SettingsStore


class ParcelStore(OwnedRecordStore):
    model = Parcel

    async def get_settings(self, owner_id: int) -> Optional[UserSettings]:
        return await SettingsStore(self.db).get_for_owner(owner_id)
