from typing import List, Optional, Tuple
from uuid import UUID

from loguru import logger
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.crud.base import CRUDBase
from taskboard.models.task import Task
from taskboard.models.user import User
from taskboard.schemas.task import TaskCreate, TaskMove


class CRUDTask(CRUDBase[Task, TaskCreate, TaskMove]):
    async def get_max_order(
        self, db: AsyncSession, *, project_id: UUID, status: str
    ) -> Optional[int]:
        """
        Highest ``order`` in the (project, status) column, or None when empty.
        """
        result = await db.execute(
            select(func.max(Task.order)).filter(
                Task.project_id == project_id, Task.status == status
            )
        )
        return result.scalar()

    async def next_order(self, db: AsyncSession, *, project_id: UUID, status: str) -> int:
        max_order = await self.get_max_order(db, project_id=project_id, status=status)
        return 0 if max_order is None else max_order + 1

    async def get_multi_by_project_with_assignee(
        self, db: AsyncSession, *, project_id: UUID
    ) -> List[Tuple[Task, Optional[User]]]:
        """
        Tasks of a project ordered by ``order``, each paired with its assignee.
        """
        logger.debug(f"Getting tasks for project_id: {project_id}")
        result = await db.execute(
            select(Task, User)
            .outerjoin(User, Task.assigned_to == User.id)
            .filter(Task.project_id == project_id)
            .order_by(Task.order.asc(), Task.created_at.asc())
        )
        return result.all()

    async def remove_by_project(self, db: AsyncSession, *, project_id: UUID) -> int:
        """
        Delete every task of a project without committing.
        """
        result = await db.execute(delete(Task).where(Task.project_id == project_id))
        logger.debug(f"Deleted {result.rowcount} tasks of project {project_id}")
        return result.rowcount


task = CRUDTask(Task)
