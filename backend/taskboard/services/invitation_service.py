from typing import Optional, Tuple

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard import crud
from taskboard.core.config import settings
from taskboard.core.errors import NotFoundError
from taskboard.core.security import (
    ProjectAccess,
    create_project_access_token,
    get_password_hash,
    verify_project_access_token,
)
from taskboard.crud.crud_project import CRUDProject
from taskboard.crud.crud_project_member import CRUDProjectMember
from taskboard.crud.crud_user import CRUDUser
from taskboard.models.user import User
from taskboard.schemas.project_member import InvitationResult, MemberInvite, MemberJoin
from taskboard.services.email_service import EmailSender, render_invite_email
from taskboard.services.membership_service import MembershipService
from taskboard.services.user_service import UserService

INVITE_SUBJECT = "Email Verification"


def build_invite_url(token: str, needs_verification: bool, base_url: Optional[str] = None) -> str:
    """
    New or unverified users go through verify-and-join, others straight to join-project.
    """
    base_url = (base_url or settings.FRONTEND_URL).rstrip("/")
    path = "verify-and-join" if needs_verification else "join-project"
    return f"{base_url}/{path}?token={token}"


class InvitationService:
    """
    Invites users by email and turns a verified project-access token into an
    active membership.
    """

    def __init__(
        self,
        db: AsyncSession,
        email_sender: EmailSender,
        users: CRUDUser = crud.user,
        projects: CRUDProject = crud.project,
        members: CRUDProjectMember = crud.project_member,
    ):
        self.db = db
        self.email_sender = email_sender
        self.users = users
        self.projects = projects
        self.user_service = UserService(db, users=users)
        self.membership = MembershipService(db, members=members)

    async def invite_member(self, invite_in: MemberInvite) -> InvitationResult:
        user, created = await self.user_service.get_or_create_invitee(invite_in.email)

        project = await self.projects.get(self.db, id=invite_in.project_id)
        if not project:
            raise NotFoundError("Project", invite_in.project_id)

        await self.membership.invite(project.id, user.id, role=invite_in.role)

        token = create_project_access_token(user.id, project.id)
        invite_url = build_invite_url(token, created or not user.is_email_verified)

        message_id = self.email_sender.send(
            user.email, INVITE_SUBJECT, render_invite_email(project.name, invite_url)
        )
        logger.info(f"Sent invitation for project {project.id} to user {user.id}")

        return InvitationResult(
            user_id=user.id,
            email=user.email,
            project_id=project.id,
            project_name=project.name,
            invite_url=invite_url,
            message_id=message_id,
        )

    async def _load_invitee(self, token: str) -> Tuple[ProjectAccess, User]:
        """
        Resolve the token's user and make sure its project still exists.

        Tokens outlive project deletion, so the project is checked before
        the account is touched.
        """
        access = verify_project_access_token(token)
        user = await self.users.get(self.db, id=access.user_id)
        if not user:
            raise NotFoundError("User", access.user_id)
        if not await self.projects.get(self.db, id=access.project_id):
            raise NotFoundError("Project", access.project_id)
        return access, user

    async def join(self, join_in: MemberJoin) -> User:
        """
        Complete an invitation: first-time invitees set their name and password.
        """
        access, user = await self._load_invitee(join_in.token)

        if not user.is_email_verified:
            user = await self.users.update(
                self.db,
                db_obj=user,
                obj_in={
                    "name": join_in.name,
                    "hashed_password": get_password_hash(join_in.password),
                    "is_email_verified": True,
                },
            )

        await self.membership.activate(access.project_id, user.id)
        return user

    async def verify(self, token: str) -> User:
        """
        Confirm the invitee's email and join the project.
        """
        access, user = await self._load_invitee(token)

        if not user.is_email_verified:
            user = await self.users.update(
                self.db, db_obj=user, obj_in={"is_email_verified": True}
            )

        await self.membership.activate(access.project_id, user.id)
        return user
