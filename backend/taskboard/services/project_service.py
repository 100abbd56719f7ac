from uuid import UUID

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard import crud
from taskboard.core.errors import ForbiddenError, InternalError, NotFoundError
from taskboard.crud.crud_project import CRUDProject
from taskboard.crud.crud_project_member import CRUDProjectMember
from taskboard.crud.crud_user import CRUDUser
from taskboard.models.project import Project
from taskboard.schemas.project import ProjectCreate
from taskboard.services.membership_service import MembershipService


class ProjectService:
    def __init__(
        self,
        db: AsyncSession,
        projects: CRUDProject = crud.project,
        users: CRUDUser = crud.user,
        members: CRUDProjectMember = crud.project_member,
    ):
        self.db = db
        self.projects = projects
        self.users = users
        self.members = members
        self.membership = MembershipService(db, members=members)

    async def create(self, project_in: ProjectCreate, user_id: UUID) -> Project:
        """
        Create a project and make its creator the active admin.

        Only users whose account role is ``admin`` may create projects.
        """
        user = await self.users.get(self.db, id=user_id)
        if not user:
            raise NotFoundError("User", user_id)
        if user.role != "admin":
            raise ForbiddenError("Only admins can create projects")

        project = await self.projects.create_with_user(
            self.db, obj_in=project_in, user_id=user.id
        )
        await self.membership.create_owner_membership(project.id, user.id)

        owner = await self.members.get_by_project_and_user(
            self.db, project_id=project.id, user_id=user.id, status="active", role="admin"
        )
        if owner is None:
            logger.error(f"Owner membership missing right after creating project {project.id}")
            raise InternalError("Project owner membership was not created", operation="create_project")

        logger.info(f"User {user.id} created project {project.id}")
        return project
