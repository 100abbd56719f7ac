from typing import List, Optional, Tuple
from uuid import UUID

from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.crud.base import CRUDBase
from taskboard.models.project import Project
from taskboard.models.project_member import ProjectMember, default_permissions
from taskboard.models.user import User
from taskboard.schemas.project_member import ProjectMember as ProjectMemberSchema


class CRUDProjectMember(CRUDBase[ProjectMember, ProjectMemberSchema, ProjectMemberSchema]):
    async def get_by_project_and_user(
        self,
        db: AsyncSession,
        *,
        project_id: UUID,
        user_id: UUID,
        status: Optional[str] = None,
        role: Optional[str] = None,
    ) -> Optional[ProjectMember]:
        """
        Get the single membership row of ``user_id`` in ``project_id``.
        """
        query = select(ProjectMember).filter(
            ProjectMember.project_id == project_id,
            ProjectMember.user_id == user_id,
        )
        if status is not None:
            query = query.filter(ProjectMember.status == status)
        if role is not None:
            query = query.filter(ProjectMember.role == role)
        result = await db.execute(query)
        return result.scalars().first()

    async def create_membership(
        self,
        db: AsyncSession,
        *,
        project_id: UUID,
        user_id: UUID,
        role: str,
        status: str,
    ) -> ProjectMember:
        db_obj = ProjectMember(
            project_id=project_id,
            user_id=user_id,
            role=role,
            status=status,
            permissions=default_permissions(),
        )
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def get_active_with_users(
        self, db: AsyncSession, *, project_id: UUID
    ) -> List[Tuple[ProjectMember, User]]:
        """
        Active memberships of a project joined to their user on ProjectMember.user_id.
        """
        result = await db.execute(
            select(ProjectMember, User)
            .join(User, ProjectMember.user_id == User.id)
            .filter(
                ProjectMember.project_id == project_id,
                ProjectMember.status == "active",
            )
            .order_by(ProjectMember.created_at.asc())
        )
        return result.all()

    async def get_teams_of_creator(
        self, db: AsyncSession, *, creator_id: UUID
    ) -> List[Tuple[ProjectMember, Project, User]]:
        """
        Every membership (any status) of every project created by ``creator_id``.

        Joins ProjectMember.project_id = Project.id and ProjectMember.user_id =
        User.id; ordered by the member's account creation time, newest first.
        """
        result = await db.execute(
            select(ProjectMember, Project, User)
            .join(Project, ProjectMember.project_id == Project.id)
            .join(User, ProjectMember.user_id == User.id)
            .filter(Project.created_by == creator_id)
            .order_by(User.created_at.desc())
        )
        return result.all()

    async def remove_by_project(self, db: AsyncSession, *, project_id: UUID) -> int:
        """
        Delete every membership of a project without committing.
        """
        result = await db.execute(
            delete(ProjectMember).where(ProjectMember.project_id == project_id)
        )
        logger.debug(f"Deleted {result.rowcount} memberships of project {project_id}")
        return result.rowcount


project_member = CRUDProjectMember(ProjectMember)
