from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, status

from taskboard import schemas
from taskboard.api import deps
from taskboard.core.errors import ForbiddenError
from taskboard.core.security import ProjectAccess
from taskboard.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


def ensure_self(access: ProjectAccess, user_id: UUID) -> None:
    if access.user_id != user_id:
        raise ForbiddenError("You can only access your own account")


@router.post("", response_model=schemas.User, status_code=status.HTTP_201_CREATED)
async def register_user(
    *,
    user_in: schemas.UserCreate,
    service: UserService = Depends(deps.get_user_service),
) -> Any:
    return await service.register(user_in)


@router.get("/{user_id}", response_model=schemas.User)
async def read_user(
    user_id: UUID,
    service: UserService = Depends(deps.get_user_service),
    access: ProjectAccess = Depends(deps.get_project_access),
) -> Any:
    ensure_self(access, user_id)
    return await service.get(user_id)


@router.patch("/{user_id}", response_model=schemas.User)
async def update_user(
    user_id: UUID,
    user_in: schemas.UserUpdate,
    service: UserService = Depends(deps.get_user_service),
    access: ProjectAccess = Depends(deps.get_project_access),
) -> Any:
    """
    Update the caller's own account.
    """
    ensure_self(access, user_id)
    return await service.update(user_id, user_in)
