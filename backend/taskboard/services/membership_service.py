from uuid import UUID

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard import crud
from taskboard.core.errors import ConflictError, ForbiddenError, NotFoundError
from taskboard.crud.crud_project_member import CRUDProjectMember
from taskboard.models.project_member import ProjectMember


class MembershipService:
    """
    Owns the ProjectMember relation and answers "may this user act on this project".

    At most one row exists per (project, user); the unique constraint on the
    table backs the check done in ``invite``.
    """

    def __init__(
        self,
        db: AsyncSession,
        members: CRUDProjectMember = crud.project_member,
    ):
        self.db = db
        self.members = members

    async def require_active_member(self, project_id: UUID, user_id: UUID) -> ProjectMember:
        member = await self.members.get_by_project_and_user(
            self.db, project_id=project_id, user_id=user_id, status="active"
        )
        if not member:
            logger.warning(f"User {user_id} is not an active member of project {project_id}")
            raise ForbiddenError("You are not a member of this project")
        return member

    async def require_active_admin(self, project_id: UUID, user_id: UUID) -> ProjectMember:
        member = await self.members.get_by_project_and_user(
            self.db, project_id=project_id, user_id=user_id, status="active", role="admin"
        )
        if not member:
            logger.warning(f"User {user_id} is not an active admin of project {project_id}")
            raise ForbiddenError("Only admins can perform this action")
        return member

    async def create_owner_membership(self, project_id: UUID, user_id: UUID) -> ProjectMember:
        member = await self.members.create_membership(
            self.db, project_id=project_id, user_id=user_id, role="admin", status="active"
        )
        logger.info(f"User {user_id} is the owning admin of project {project_id}")
        return member

    async def invite(self, project_id: UUID, user_id: UUID, role: str = "member") -> ProjectMember:
        """
        Create an ``invited`` membership.

        Any existing row, whatever its status, is a conflict: re-inviting never
        changes a role.
        """
        existing = await self.members.get_by_project_and_user(
            self.db, project_id=project_id, user_id=user_id
        )
        if existing:
            raise ConflictError("User already invited to this project")

        try:
            member = await self.members.create_membership(
                self.db, project_id=project_id, user_id=user_id, role=role, status="invited"
            )
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("User already invited to this project")

        logger.info(f"Invited user {user_id} to project {project_id} as {role}")
        return member

    async def activate(self, project_id: UUID, user_id: UUID) -> ProjectMember:
        """
        Move a membership to ``active``; a missing row is created as active member.

        Calling it again on an active row is a no-op.
        """
        member = await self.members.get_by_project_and_user(
            self.db, project_id=project_id, user_id=user_id
        )
        if member is None:
            try:
                member = await self.members.create_membership(
                    self.db, project_id=project_id, user_id=user_id,
                    role="member", status="active",
                )
            except IntegrityError:
                # Either a concurrent insert won or a foreign key is dangling.
                await self.db.rollback()
                member = await self.members.get_by_project_and_user(
                    self.db, project_id=project_id, user_id=user_id
                )
                if member is None:
                    raise NotFoundError("Project", project_id)
            else:
                logger.info(f"User {user_id} joined project {project_id} as active member")
                return member

        if member.status != "active":
            member = await self.members.update(
                self.db, db_obj=member, obj_in={"status": "active"}
            )
            logger.info(f"Activated membership of user {user_id} in project {project_id}")
        return member
