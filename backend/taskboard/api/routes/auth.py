from typing import Any

from fastapi import APIRouter, Depends

from taskboard import schemas
from taskboard.api import deps
from taskboard.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login", response_model=schemas.ProjectAccessToken)
async def login(
    *,
    login_in: schemas.LoginRequest,
    service: AuthService = Depends(deps.get_auth_service),
) -> Any:
    """
    Exchange credentials for a bearer token, optionally scoped to a project.
    """
    return await service.login(login_in)
