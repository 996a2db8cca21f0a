"""
Project Management API Endpoints.

Owner-scoped projects and the tasks under them.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession
from opsboard.app.db.session import get_db
from opsboard.app.core.dependencies import get_current_owner_id
from opsboard.app.core.exceptions import ResourceNotFoundError
from opsboard.app.schemas.common import MutationResponse
from opsboard.app.schemas.project import (
    ProjectCreate, ProjectUpdate, ProjectResponse,
    ProjectTaskCreate, ProjectTaskUpdate, ProjectTaskResponse
)
from opsboard.app.services.project_store import ProjectStore, ProjectTaskStore

router = APIRouter(prefix="/projects", tags=["Projects"])


async def _require_project(db: AsyncSession, project_id: int, owner_id: int):
    project = await ProjectStore(db).get(project_id, owner_id)
    if project is None:
        raise ResourceNotFoundError("Project", project_id)
    return project


@router.get("", response_model=List[ProjectResponse])
async def list_projects(
    owner_id: int = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db)
):
    projects = await ProjectStore(db).list_for_owner(owner_id)
    return [ProjectResponse.model_validate(p) for p in projects]


@router.post("", response_model=MutationResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    project_data: ProjectCreate,
    owner_id: int = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db)
):
    project = await ProjectStore(db).create(owner_id, project_data.model_dump())
    return MutationResponse(id=project.id)


@router.get("/{project_id}", response_model=Optional[ProjectResponse])
async def get_project(
    project_id: int = Path(..., description="Project ID"),
    owner_id: int = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db)
):
    """Get one project, or null when the caller has no such project."""
    project = await ProjectStore(db).get(project_id, owner_id)
    if project is None:
        return None
    return ProjectResponse.model_validate(project)


@router.patch("/{project_id}", response_model=MutationResponse)
async def update_project(
    project_data: ProjectUpdate,
    project_id: int = Path(..., description="Project ID"),
    owner_id: int = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db)
):
    update_data = project_data.model_dump(exclude_unset=True, exclude_none=True)
    matched = await ProjectStore(db).update(project_id, owner_id, update_data)
    if not matched:
        raise ResourceNotFoundError("Project", project_id)
    return MutationResponse(id=project_id)


@router.delete("/{project_id}", response_model=MutationResponse)
async def delete_project(
    project_id: int = Path(..., description="Project ID"),
    owner_id: int = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db)
):
    """Delete a project together with its tasks."""
    deleted = await ProjectStore(db).delete_with_tasks(project_id, owner_id)
    if not deleted:
        raise ResourceNotFoundError("Project", project_id)
    return MutationResponse(id=project_id)


# --- Project tasks ---

@router.get("/{project_id}/tasks", response_model=List[ProjectTaskResponse])
async def list_project_tasks(
    project_id: int = Path(..., description="Project ID"),
    owner_id: int = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db)
):
    await _require_project(db, project_id, owner_id)
    tasks = await ProjectTaskStore(db).list_for_project(project_id)
    return [ProjectTaskResponse.model_validate(t) for t in tasks]


@router.post("/{project_id}/tasks", response_model=MutationResponse, status_code=status.HTTP_201_CREATED)
async def create_project_task(
    task_data: ProjectTaskCreate,
    project_id: int = Path(..., description="Project ID"),
    owner_id: int = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db)
):
    await _require_project(db, project_id, owner_id)
    task = await ProjectTaskStore(db).create_in_project(project_id, task_data.model_dump())
    return MutationResponse(id=task.id)


@router.patch("/{project_id}/tasks/{task_id}", response_model=MutationResponse)
async def update_project_task(
    task_data: ProjectTaskUpdate,
    project_id: int = Path(..., description="Project ID"),
    task_id: int = Path(..., description="Task ID"),
    owner_id: int = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db)
):
    await _require_project(db, project_id, owner_id)
    update_data = task_data.model_dump(exclude_unset=True, exclude_none=True)
    matched = await ProjectTaskStore(db).update_in_project(task_id, project_id, update_data)
    if not matched:
        raise ResourceNotFoundError("Task", task_id)
    return MutationResponse(id=task_id)


@router.delete("/{project_id}/tasks/{task_id}", response_model=MutationResponse)
async def delete_project_task(
    project_id: int = Path(..., description="Project ID"),
    task_id: int = Path(..., description="Task ID"),
    owner_id: int = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db)
):
    await _require_project(db, project_id, owner_id)
    deleted = await ProjectTaskStore(db).delete_in_project(task_id, project_id)
    if not deleted:
        raise ResourceNotFoundError("Task", task_id)
    return MutationResponse(id=task_id)
