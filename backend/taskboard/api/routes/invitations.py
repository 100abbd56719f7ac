from typing import Any

from fastapi import APIRouter, Depends

from taskboard import schemas
from taskboard.api import deps
from taskboard.core.security import ProjectAccess
from taskboard.services.invitation_service import InvitationService

router = APIRouter(prefix="/invitations", tags=["Invitations"])


@router.post("", response_model=schemas.InvitationResult)
async def invite_member(
    *,
    invite_in: schemas.MemberInvite,
    service: InvitationService = Depends(deps.get_invitation_service),
    access: ProjectAccess = Depends(deps.get_project_access),
) -> Any:
    """
    Invite a user by email and send them a tokenized join link.
    """
    return await service.invite_member(invite_in)


@router.post("/join", response_model=schemas.User)
async def join_project(
    *,
    join_in: schemas.MemberJoin,
    service: InvitationService = Depends(deps.get_invitation_service),
) -> Any:
    return await service.join(join_in)


@router.post("/verify", response_model=schemas.User)
async def verify_invitation(
    *,
    verify_in: schemas.MemberVerify,
    service: InvitationService = Depends(deps.get_invitation_service),
) -> Any:
    return await service.verify(verify_in.token)
