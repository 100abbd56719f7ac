from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, UUID4

MemberRole = Literal["admin", "member"]
MemberStatus = Literal["invited", "active"]


class MemberPermissions(BaseModel):
    create_tasks: bool = True
    assign_tasks: bool = False


class ProjectMemberInDBBase(BaseModel):
    id: UUID4
    project_id: UUID4
    user_id: UUID4
    role: MemberRole
    status: MemberStatus
    permissions: MemberPermissions
    created_at: datetime

    class Config:
        from_attributes = True


class ProjectMember(ProjectMemberInDBBase):
    pass


class MemberInvite(BaseModel):
    email: EmailStr
    project_id: UUID4
    role: MemberRole = "member"


class InvitationResult(BaseModel):
    user_id: UUID4
    email: EmailStr
    project_id: UUID4
    project_name: str
    invite_url: str
    message_id: Optional[str] = None


class MemberJoin(BaseModel):
    name: str
    password: str
    token: str


class MemberVerify(BaseModel):
    token: str
