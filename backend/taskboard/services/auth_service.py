from typing import Optional
from uuid import UUID

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard import crud
from taskboard.core.errors import UnauthorizedError
from taskboard.core.security import NO_PROJECT, create_project_access_token, verify_password
from taskboard.crud.crud_project_member import CRUDProjectMember
from taskboard.crud.crud_user import CRUDUser
from taskboard.models.user import User
from taskboard.schemas.token import LoginRequest, ProjectAccessToken
from taskboard.services.membership_service import MembershipService


class AuthService:
    """
    Exchanges email and password for a project-access token.
    """

    def __init__(
        self,
        db: AsyncSession,
        users: CRUDUser = crud.user,
        members: CRUDProjectMember = crud.project_member,
    ):
        self.db = db
        self.users = users
        self.membership = MembershipService(db, members=members)

    async def authenticate(self, email: str, password: str) -> User:
        user = await self.users.get_by_email(self.db, email=email)
        # Placeholder invitees have no password and cannot log in yet
        if not user or not verify_password(password, user.hashed_password):
            logger.warning("Rejected login: incorrect email or password")
            raise UnauthorizedError("Incorrect email or password")
        return user

    async def login(self, login_in: LoginRequest) -> ProjectAccessToken:
        """
        Issue a token for the caller.

        With ``project_id`` the caller must be an active member of it; without
        one the token carries ``NO_PROJECT`` and only identifies the account.
        """
        user = await self.authenticate(login_in.email, login_in.password)

        project_id: Optional[UUID] = login_in.project_id
        if project_id is not None:
            await self.membership.require_active_member(project_id, user.id)
        else:
            project_id = NO_PROJECT

        logger.info(f"User {user.id} logged in for project {project_id}")
        return ProjectAccessToken(
            access_token=create_project_access_token(user.id, project_id),
            user_id=user.id,
            project_id=project_id,
        )
