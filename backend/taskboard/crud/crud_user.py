from typing import Any, Dict, Optional, Union
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.security import get_password_hash
from taskboard.crud.base import CRUDBase
from taskboard.models.user import User
from taskboard.schemas.user import UserCreate, UserUpdate


def normalize_email(email: str) -> str:
    return email.strip().lower()


class CRUDUser(CRUDBase[User, UserCreate, UserUpdate]):
    async def get_by_email(self, db: AsyncSession, *, email: str) -> Optional[User]:
        result = await db.execute(
            select(User).filter(User.email == normalize_email(email))
        )
        return result.scalars().first()

    async def is_email_taken(
        self, db: AsyncSession, *, email: str, exclude_id: Optional[UUID] = None
    ) -> bool:
        """
        Check whether another account already uses ``email``.
        """
        query = select(User.id).filter(User.email == normalize_email(email))
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        result = await db.execute(query.limit(1))
        return result.first() is not None

    async def create(self, db: AsyncSession, *, obj_in: UserCreate) -> User:
        db_obj = User(
            email=normalize_email(obj_in.email),
            name=obj_in.name,
            hashed_password=get_password_hash(obj_in.password),
            role=obj_in.role,
        )
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def create_invitee(self, db: AsyncSession, *, email: str) -> User:
        """
        Create the placeholder account of someone invited before registering.
        """
        db_obj = User(
            email=normalize_email(email),
            role="user",
            is_email_verified=False,
        )
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def update(
        self, db: AsyncSession, *, db_obj: User, obj_in: Union[UserUpdate, Dict[str, Any]]
    ) -> User:
        if isinstance(obj_in, dict):
            update_data = dict(obj_in)
        else:
            update_data = obj_in.model_dump(exclude_unset=True)
        if update_data.get("email"):
            update_data["email"] = normalize_email(update_data["email"])
        if update_data.get("password"):
            update_data["hashed_password"] = get_password_hash(update_data.pop("password"))
        else:
            update_data.pop("password", None)
        return await super().update(db, db_obj=db_obj, obj_in=update_data)


user = CRUDUser(User)
