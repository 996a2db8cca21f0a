"""
Project and project task persistence.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import select, update, delete

from opsboard.app.models.project import Project, ProjectTask
from opsboard.app.services.records import OwnedRecordStore, RecordStore


class ProjectStore(OwnedRecordStore):
    model = Project

    async def delete_with_tasks(self, project_id: int, owner_id: int) -> int:
        """Delete a project and all of its tasks in one transaction."""
        statements = [
            delete(ProjectTask)
            .where(
                ProjectTask.project_id == project_id,
                ProjectTask.project_id.in_(
                    select(Project.id).where(*self._owned(project_id, owner_id))
                ),
            )
            .execution_options(synchronize_session=False),
            delete(Project)
            .where(*self._owned(project_id, owner_id))
            .execution_options(synchronize_session=False),
        ]
        _, project_result = await self._write_all(statements, "delete")
        return project_result.rowcount


class ProjectTaskStore(RecordStore):
    """
    Tasks are scoped by their project rather than an owner column.

    Callers confirm the project belongs to the owner before using this store.
    """

    model = ProjectTask

    def _in_project(self, task_id: int, project_id: int):
        return (ProjectTask.id == task_id, ProjectTask.project_id == project_id)

    async def list_for_project(self, project_id: int) -> List[ProjectTask]:
        query = (
            select(ProjectTask)
            .where(ProjectTask.project_id == project_id)
            .order_by(ProjectTask.created_at.desc(), ProjectTask.id.desc())
        )
        return await self._read_all(query)

    async def get_in_project(self, task_id: int, project_id: int) -> Optional[ProjectTask]:
        query = select(ProjectTask).where(*self._in_project(task_id, project_id)).limit(1)
        return await self._read_one(query)

    async def create_in_project(self, project_id: int, fields: Dict[str, Any]) -> ProjectTask:
        task = ProjectTask(project_id=project_id, **fields)
        self.db.add(task)
        await self._commit_new(task)
        return task

    async def update_in_project(self, task_id: int, project_id: int, fields: Dict[str, Any]) -> int:
        if not fields:
            return 1 if await self.get_in_project(task_id, project_id) is not None else 0
        statement = (
            update(ProjectTask)
            .where(*self._in_project(task_id, project_id))
            .values(**fields)
            .execution_options(synchronize_session=False)
        )
        result = await self._write(statement, "update")
        return result.rowcount

    async def delete_in_project(self, task_id: int, project_id: int) -> int:
        statement = (
            delete(ProjectTask)
            .where(*self._in_project(task_id, project_id))
            .execution_options(synchronize_session=False)
        )
        result = await self._write(statement, "delete")
        return result.rowcount
