from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, UUID4


class LoginRequest(BaseModel):
    email: EmailStr
    password: str
    # Scope the token to one project; omitted means an account-only token
    project_id: Optional[UUID4] = None


class ProjectAccessToken(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: UUID4
    # NO_PROJECT (the nil UUID) for account-only tokens
    project_id: UUID
