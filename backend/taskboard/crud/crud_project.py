from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import and_, delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.crud.base import CRUDBase
from taskboard.models.project import Project
from taskboard.models.project_member import ProjectMember
from taskboard.schemas.project import ProjectCreate


class CRUDProject(CRUDBase[Project, ProjectCreate, ProjectCreate]):
    async def create_with_user(
        self, db: AsyncSession, *, obj_in: ProjectCreate, user_id: UUID
    ) -> Project:
        """
        Create a new project owned by ``user_id``.
        """
        db_obj = Project(
            **obj_in.model_dump(),
            created_by=user_id,
        )
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def get_visible_to_user(
        self, db: AsyncSession, *, user_id: UUID
    ) -> List[Tuple[Project, Optional[ProjectMember]]]:
        """
        Projects created by ``user_id`` or where ``user_id`` is an active member.

        Join key: ProjectMember.project_id = Project.id, restricted to the
        caller's active row. Newest project first.
        """
        membership = and_(
            ProjectMember.project_id == Project.id,
            ProjectMember.user_id == user_id,
            ProjectMember.status == "active",
        )
        result = await db.execute(
            select(Project, ProjectMember)
            .outerjoin(ProjectMember, membership)
            .filter(or_(Project.created_by == user_id, ProjectMember.id.is_not(None)))
            .order_by(Project.created_at.desc())
        )
        return result.all()

    async def delete_by_id(self, db: AsyncSession, *, id: UUID) -> int:
        """
        Issue the DELETE without committing; the caller owns the transaction.
        """
        result = await db.execute(delete(Project).where(Project.id == id))
        return result.rowcount


project = CRUDProject(Project)
