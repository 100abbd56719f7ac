from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, status

from taskboard import schemas
from taskboard.api import deps
from taskboard.core.security import ProjectAccess
from taskboard.services.task_service import TaskService

router = APIRouter(prefix="/tasks", tags=["Tasks"])


@router.post("", response_model=schemas.Task, status_code=status.HTTP_201_CREATED)
async def create_task(
    *,
    task_in: schemas.TaskCreate,
    service: TaskService = Depends(deps.get_task_service),
    access: ProjectAccess = Depends(deps.get_project_access),
) -> Any:
    return await service.create(task_in, access.user_id)


@router.patch("/{task_id}/column", response_model=schemas.Task)
async def move_task(
    task_id: UUID,
    move_in: schemas.TaskMove,
    service: TaskService = Depends(deps.get_task_service),
    access: ProjectAccess = Depends(deps.get_project_access),
) -> Any:
    """
    Move a task to the end of another column.
    """
    return await service.move_to_column(task_id, move_in.new_status)


@router.patch("/{task_id}/assignee", response_model=schemas.Task)
async def assign_task(
    task_id: UUID,
    assign_in: schemas.TaskAssign,
    service: TaskService = Depends(deps.get_task_service),
    access: ProjectAccess = Depends(deps.get_project_access),
) -> Any:
    return await service.assign(task_id, assign_in.assigned_to, access.user_id)
