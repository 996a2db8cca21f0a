"""
Record store bases.

Reads degrade to empty results when the database cannot be reached so the
dashboard keeps rendering; writes raise PersistenceUnavailable.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select, update, delete
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from opsboard.app.core.exceptions import PersistenceUnavailable

logger = logging.getLogger("opsboard.records")

# Connection-level failures; constraint and programming errors still propagate
UNAVAILABLE_ERRORS = (OperationalError, InterfaceError, OSError)


class RecordStore:
    """
    Session helpers shared by every store.

    Subclasses set ``model``.
    """

    model = None

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _read_all(self, query) -> List[Any]:
        query = query.execution_options(populate_existing=True)
        try:
            result = await self.db.execute(query)
        except UNAVAILABLE_ERRORS as e:
            logger.warning("%s read degraded, database unavailable: %s", self.model.__tablename__, e)
            return []
        return list(result.scalars().all())

    async def _read_one(self, query) -> Optional[Any]:
        query = query.execution_options(populate_existing=True)
        try:
            result = await self.db.execute(query)
        except UNAVAILABLE_ERRORS as e:
            logger.warning("%s read degraded, database unavailable: %s", self.model.__tablename__, e)
            return None
        return result.scalar_one_or_none()

    async def _write(self, statement, operation: str):
        results = await self._write_all([statement], operation)
        return results[0]

    async def _write_all(self, statements, operation: str) -> list:
        """Execute statements in order and commit once; a failure commits nothing."""
        try:
            results = [await self.db.execute(statement) for statement in statements]
            await self.db.commit()
        except UNAVAILABLE_ERRORS as e:
            logger.error("%s %s failed, database unavailable: %s", self.model.__tablename__, operation, e)
            raise PersistenceUnavailable(operation) from e
        return results

    async def _commit_new(self, record) -> None:
        try:
            await self.db.commit()
            await self.db.refresh(record)
        except UNAVAILABLE_ERRORS as e:
            logger.error("%s create failed, database unavailable: %s", self.model.__tablename__, e)
            raise PersistenceUnavailable("create") from e


class OwnedRecordStore(RecordStore):
    """
    CRUD helpers for a model with ``id`` and ``user_id`` columns.

    Every query is filtered by (id, owner). Subclasses may override ``ordering``.
    """

    def ordering(self) -> tuple:
        return (self.model.created_at.desc(), self.model.id.desc())

    def _owned(self, record_id: int, owner_id: int):
        return (self.model.id == record_id, self.model.user_id == owner_id)

    async def list_for_owner(self, owner_id: int) -> List[Any]:
        query = select(self.model).where(self.model.user_id == owner_id).order_by(*self.ordering())
        return await self._read_all(query)

    async def get(self, record_id: int, owner_id: int) -> Optional[Any]:
        query = select(self.model).where(*self._owned(record_id, owner_id)).limit(1)
        return await self._read_one(query)

    async def create(self, owner_id: int, fields: Dict[str, Any]) -> Any:
        record = self.model(user_id=owner_id, **fields)
        self.db.add(record)
        await self._commit_new(record)
        return record

    async def update(self, record_id: int, owner_id: int, fields: Dict[str, Any]) -> int:
        """
        Apply a partial update in one statement.

        Returns the number of matched rows; 0 means no (id, owner) match,
        which is not an error here.
        """
        if not fields:
            return 1 if await self.get(record_id, owner_id) is not None else 0

        statement = (
            update(self.model)
            .where(*self._owned(record_id, owner_id))
            .values(**fields)
            .execution_options(synchronize_session=False)
        )
        result = await self._write(statement, "update")
        return result.rowcount

    async def delete(self, record_id: int, owner_id: int) -> int:
        statement = (
            delete(self.model)
            .where(*self._owned(record_id, owner_id))
            .execution_options(synchronize_session=False)
        )
        result = await self._write(statement, "delete")
        return result.rowcount
