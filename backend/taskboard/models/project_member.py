from typing import Any, Dict

from sqlalchemy import Column, Enum, ForeignKey, JSON, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from taskboard.models.base import BaseModel

MEMBER_ROLES = ("admin", "member")
MEMBER_STATUSES = ("invited", "active")


def default_permissions() -> Dict[str, Any]:
    return {"create_tasks": True, "assign_tasks": False}


class ProjectMember(BaseModel):
    """Membership of one user in one project."""

    __table_args__ = (
        UniqueConstraint("project_id", "user_id", name="uq_projectmember_project_user"),
    )

    project_id = Column(Uuid(as_uuid=True), ForeignKey("project.id"), nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("user.id"), nullable=False, index=True)
    role = Column(Enum(*MEMBER_ROLES, name="member_role"), default="member", nullable=False)
    status = Column(
        Enum(*MEMBER_STATUSES, name="member_status"), default="invited", nullable=False
    )
    # Stored for clients; task creation and assignment do not consult them.
    permissions = Column(JSON, default=default_permissions, nullable=False)

    # Relationships
    project = relationship("Project", back_populates="members", lazy="raise")
    user = relationship("User", back_populates="memberships", lazy="raise")

    def __repr__(self):
        return f"<ProjectMember {self.user_id} in {self.project_id} ({self.role}/{self.status})>"
