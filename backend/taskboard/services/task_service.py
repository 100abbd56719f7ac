from typing import List, Optional
from uuid import UUID

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard import crud
from taskboard.core.errors import InternalError, InvalidAssigneeError, NotFoundError
from taskboard.crud.crud_project import CRUDProject
from taskboard.crud.crud_project_member import CRUDProjectMember
from taskboard.crud.crud_task import CRUDTask
from taskboard.models.task import Task
from taskboard.schemas.project import ProjectDeleteSummary
from taskboard.schemas.task import TaskCreate, TaskWithAssignee
from taskboard.schemas.user import UserSummary
from taskboard.services.membership_service import MembershipService


class TaskService:
    """
    Task lifecycle inside a project's kanban columns.

    Column order is computed as "max order in the column + 1". The read and
    the write are separate statements, so two concurrent writers to the same
    column can end up with the same ``order``; nothing here locks the column.
    """

    def __init__(
        self,
        db: AsyncSession,
        tasks: CRUDTask = crud.task,
        projects: CRUDProject = crud.project,
        members: CRUDProjectMember = crud.project_member,
    ):
        self.db = db
        self.tasks = tasks
        self.projects = projects
        self.members = members
        self.membership = MembershipService(db, members=members)

    async def create(self, task_in: TaskCreate, requestor_id: UUID) -> Task:
        """
        Create a task at the end of its status column.

        Any active member may create tasks: the ``create_tasks`` permission
        stored on the membership is not consulted.
        """
        await self.membership.require_active_member(task_in.project_id, requestor_id)

        order = await self.tasks.next_order(
            self.db, project_id=task_in.project_id, status=task_in.status
        )
        task = await self.tasks.create(
            self.db,
            obj_in={
                "title": task_in.title,
                "description": task_in.description,
                "status": task_in.status,
                "project_id": task_in.project_id,
                "assigned_to": task_in.assigned_to,
                "created_by": requestor_id,
                "order": order,
            },
        )
        logger.info(
            f"Created task {task.id} in project {task.project_id} [{task.status}#{task.order}]"
        )
        return task

    async def list_by_project(self, project_id: UUID, user_id: UUID) -> List[TaskWithAssignee]:
        await self.membership.require_active_member(project_id, user_id)

        rows = await self.tasks.get_multi_by_project_with_assignee(
            self.db, project_id=project_id
        )
        return [
            TaskWithAssignee(
                id=task.id,
                title=task.title,
                description=task.description,
                status=task.status,
                project_id=task.project_id,
                assigned_to=task.assigned_to,
                created_by=task.created_by,
                order=task.order,
                created_at=task.created_at,
                updated_at=task.updated_at,
                assigned_user=UserSummary.model_validate(assignee) if assignee else None,
            )
            for task, assignee in rows
        ]

    async def move_to_column(self, task_id: UUID, new_status: str) -> Task:
        """
        Move a task to the end of ``new_status``.

        Moving within the same column also appends; siblings are never
        renumbered. No membership check is made on the caller.
        """
        task = await self.tasks.get(self.db, id=task_id)
        if not task:
            raise NotFoundError("Task", task_id)

        order = await self.tasks.next_order(
            self.db, project_id=task.project_id, status=new_status
        )
        task = await self.tasks.update(
            self.db, db_obj=task, obj_in={"status": new_status, "order": order}
        )
        logger.info(f"Moved task {task.id} to [{task.status}#{task.order}]")
        return task

    async def assign(self, task_id: UUID, assignee_id: UUID, requestor_id: UUID) -> Task:
        task = await self.tasks.get(self.db, id=task_id)
        if not task:
            raise NotFoundError("Task", task_id)

        await self.membership.require_active_member(task.project_id, requestor_id)

        assignee = await self.members.get_by_project_and_user(
            self.db, project_id=task.project_id, user_id=assignee_id, status="active"
        )
        if not assignee:
            raise InvalidAssigneeError(assignee_id)

        task = await self.tasks.update(
            self.db, db_obj=task, obj_in={"assigned_to": assignee_id}
        )
        logger.info(f"Assigned task {task.id} to user {assignee_id}")
        return task

    async def delete_project_cascade(
        self, requestor_id: UUID, project_id: UUID
    ) -> ProjectDeleteSummary:
        """
        Delete a project with its tasks and memberships.

        Children go before the parent and everything runs in one transaction:
        a failure rolls back all three deletions and is reported as
        ``InternalError``.
        """
        project = await self.projects.get(self.db, id=project_id)
        if not project:
            raise NotFoundError("Project", project_id)

        await self.membership.require_active_admin(project_id, requestor_id)

        try:
            deleted_tasks = await self.tasks.remove_by_project(self.db, project_id=project_id)
            deleted_members = await self.members.remove_by_project(
                self.db, project_id=project_id
            )
            await self.projects.delete_by_id(self.db, id=project_id)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Error deleting project {project_id}: {str(e)}")
            raise InternalError("Failed to delete project", operation="delete_project")

        logger.info(
            f"Deleted project {project_id} with {deleted_tasks} tasks "
            f"and {deleted_members} memberships"
        )
        return ProjectDeleteSummary(
            project_id=project_id,
            deleted_tasks=deleted_tasks,
            deleted_members=deleted_members,
        )
