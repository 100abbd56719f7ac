from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.security import ProjectAccess, verify_project_access_token
from taskboard.db.session import get_db
from taskboard.services.auth_service import AuthService
from taskboard.services.email_service import CeleryEmailSender, EmailSender
from taskboard.services.invitation_service import InvitationService
from taskboard.services.project_service import ProjectService
from taskboard.services.task_service import TaskService
from taskboard.services.user_service import UserService
from taskboard.services.view_service import ViewService


async def get_project_access(
    authorization: Optional[str] = Header(default=None),
) -> ProjectAccess:
    """
    Resolve the caller from the project-access token in ``Authorization``.
    """
    return verify_project_access_token(authorization)


def get_email_sender() -> EmailSender:
    return CeleryEmailSender()


def get_auth_service(session: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(session)


def get_user_service(session: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(session)


def get_project_service(session: AsyncSession = Depends(get_db)) -> ProjectService:
    return ProjectService(session)


def get_task_service(session: AsyncSession = Depends(get_db)) -> TaskService:
    return TaskService(session)


def get_view_service(session: AsyncSession = Depends(get_db)) -> ViewService:
    return ViewService(session)


def get_invitation_service(
    session: AsyncSession = Depends(get_db),
    email_sender: EmailSender = Depends(get_email_sender),
) -> InvitationService:
    return InvitationService(session, email_sender)
