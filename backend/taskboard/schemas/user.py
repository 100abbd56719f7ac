from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, UUID4

UserRole = Literal["user", "admin"]


class UserBase(BaseModel):
    email: Optional[EmailStr] = None
    name: Optional[str] = None


class UserCreate(UserBase):
    email: EmailStr
    password: str
    name: str
    role: UserRole = "user"


class UserUpdate(UserBase):
    password: Optional[str] = None


class UserInDBBase(UserBase):
    id: Optional[UUID4] = None
    role: UserRole = "user"
    is_email_verified: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class User(UserInDBBase):
    pass


class UserSummary(BaseModel):
    """Denormalized snapshot of a user embedded in other views."""
    id: UUID4
    name: Optional[str] = None
    email: EmailStr
    role: UserRole

    class Config:
        from_attributes = True
