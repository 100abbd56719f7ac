from typing import Tuple
from uuid import UUID

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard import crud
from taskboard.core.errors import ConflictError, NotFoundError
from taskboard.crud.crud_user import CRUDUser
from taskboard.models.user import User
from taskboard.schemas.user import UserCreate, UserUpdate


class UserService:
    def __init__(self, db: AsyncSession, users: CRUDUser = crud.user):
        self.db = db
        self.users = users

    async def register(self, user_in: UserCreate) -> User:
        if await self.users.is_email_taken(self.db, email=user_in.email):
            raise ConflictError("Email already taken")
        user = await self.users.create(self.db, obj_in=user_in)
        logger.info(f"Registered user {user.id}")
        return user

    async def get(self, user_id: UUID) -> User:
        user = await self.users.get(self.db, id=user_id)
        if not user:
            raise NotFoundError("User", user_id)
        return user

    async def update(self, user_id: UUID, user_in: UserUpdate) -> User:
        user = await self.get(user_id)
        if user_in.email and await self.users.is_email_taken(
            self.db, email=user_in.email, exclude_id=user_id
        ):
            raise ConflictError("Email already taken")
        return await self.users.update(self.db, db_obj=user, obj_in=user_in)

    async def get_or_create_invitee(self, email: str) -> Tuple[User, bool]:
        """
        Return the account for ``email``, creating an unverified placeholder if needed.
        """
        user = await self.users.get_by_email(self.db, email=email)
        if user:
            return user, False
        user = await self.users.create_invitee(self.db, email=email)
        logger.info(f"Created placeholder account {user.id} for invitee")
        return user, True
