from typing import List
from uuid import UUID

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard import crud
from taskboard.core.errors import NotFoundError
from taskboard.crud.crud_project import CRUDProject
from taskboard.crud.crud_project_member import CRUDProjectMember
from taskboard.schemas.project_member import MemberPermissions
from taskboard.schemas.user import UserSummary
from taskboard.schemas.views import MyProject, ProjectMemberView, TeamMember


class ViewService:
    """
    Read-only compositions across users, projects and memberships.

    Each view reflects the store at call time; nothing is cached.
    """

    def __init__(
        self,
        db: AsyncSession,
        projects: CRUDProject = crud.project,
        members: CRUDProjectMember = crud.project_member,
    ):
        self.db = db
        self.projects = projects
        self.members = members

    async def my_projects(self, user_id: UUID) -> List[MyProject]:
        rows = await self.projects.get_visible_to_user(self.db, user_id=user_id)
        return [
            MyProject(
                id=project.id,
                name=project.name,
                description=project.description,
                created_by=project.created_by,
                created_at=project.created_at,
                updated_at=project.updated_at,
                is_creator=project.created_by == user_id,
                member_role=membership.role if membership else None,
                member_status=membership.status if membership else None,
            )
            for project, membership in rows
        ]

    async def project_members(self, project_id: UUID) -> List[ProjectMemberView]:
        """
        Active members of a project.

        An empty roster is reported as ``NotFoundError``, not an empty list.
        """
        rows = await self.members.get_active_with_users(self.db, project_id=project_id)
        if not rows:
            logger.debug(f"No active members for project {project_id}")
            raise NotFoundError(
                "ProjectMember", message="No members found for this project"
            )
        return [
            ProjectMemberView(
                id=member.id,
                project_id=member.project_id,
                role=member.role,
                status=member.status,
                permissions=MemberPermissions(**(member.permissions or {})),
                user=UserSummary.model_validate(user),
            )
            for member, user in rows
        ]

    async def my_teams(self, creator_id: UUID) -> List[TeamMember]:
        rows = await self.members.get_teams_of_creator(self.db, creator_id=creator_id)
        return [
            TeamMember(
                project_id=project.id,
                project_name=project.name,
                member_user_id=user.id,
                name=user.name,
                email=user.email,
                role=user.role,
                status=member.status,
                created_at=user.created_at,
            )
            for member, project, user in rows
        ]
