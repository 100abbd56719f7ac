from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, UUID4

from taskboard.schemas.project_member import MemberPermissions, MemberRole, MemberStatus
from taskboard.schemas.user import UserRole, UserSummary


class MyProject(BaseModel):
    """A project visible to the caller, annotated with the caller's relation to it."""
    id: UUID4
    name: str
    description: Optional[str] = None
    created_by: UUID4
    created_at: datetime
    updated_at: datetime
    is_creator: bool
    member_role: Optional[MemberRole] = None
    member_status: Optional[MemberStatus] = None


class ProjectMemberView(BaseModel):
    id: UUID4
    project_id: UUID4
    role: MemberRole
    status: MemberStatus
    permissions: MemberPermissions
    user: UserSummary


class TeamMember(BaseModel):
    """One membership row of a project the caller created."""
    project_id: UUID4
    project_name: str
    member_user_id: UUID4
    name: Optional[str] = None
    email: EmailStr
    role: UserRole
    status: MemberStatus
    created_at: datetime
