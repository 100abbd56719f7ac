from typing import Any, List
from uuid import UUID

from fastapi import APIRouter, Depends, status

from taskboard import schemas
from taskboard.api import deps
from taskboard.core.security import ProjectAccess
from taskboard.services.project_service import ProjectService
from taskboard.services.task_service import TaskService
from taskboard.services.view_service import ViewService

# Define the router with explicit prefix
router = APIRouter(prefix="/projects", tags=["Projects"])


@router.post("", response_model=schemas.Project, status_code=status.HTTP_201_CREATED)
async def create_project(
    *,
    project_in: schemas.ProjectCreate,
    service: ProjectService = Depends(deps.get_project_service),
    access: ProjectAccess = Depends(deps.get_project_access),
) -> Any:
    """
    Create a new project owned by the caller.
    """
    return await service.create(project_in, access.user_id)


@router.get("/mine", response_model=List[schemas.MyProject])
async def read_my_projects(
    service: ViewService = Depends(deps.get_view_service),
    access: ProjectAccess = Depends(deps.get_project_access),
) -> Any:
    """
    Projects the caller created or is an active member of.
    """
    return await service.my_projects(access.user_id)


@router.get("/teams", response_model=List[schemas.TeamMember])
async def read_my_teams(
    service: ViewService = Depends(deps.get_view_service),
    access: ProjectAccess = Depends(deps.get_project_access),
) -> Any:
    """
    Every member of every project the caller created.
    """
    return await service.my_teams(access.user_id)


@router.get("/{project_id}/members", response_model=List[schemas.ProjectMemberView])
async def read_project_members(
    project_id: UUID,
    service: ViewService = Depends(deps.get_view_service),
) -> Any:
    return await service.project_members(project_id)


@router.get("/{project_id}/tasks", response_model=List[schemas.TaskWithAssignee])
async def read_project_tasks(
    project_id: UUID,
    service: TaskService = Depends(deps.get_task_service),
    access: ProjectAccess = Depends(deps.get_project_access),
) -> Any:
    return await service.list_by_project(project_id, access.user_id)


@router.delete("/{project_id}", response_model=schemas.ProjectDeleteSummary)
async def delete_project(
    project_id: UUID,
    service: TaskService = Depends(deps.get_task_service),
    access: ProjectAccess = Depends(deps.get_project_access),
) -> Any:
    """
    Delete a project together with its tasks and memberships.
    """
    return await service.delete_project_cascade(access.user_id, project_id)
