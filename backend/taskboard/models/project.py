from sqlalchemy import Column, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship

from taskboard.models.base import BaseModel


class Project(BaseModel):
    """Project owning a kanban board and its member roster."""

    name = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=True)
    created_by = Column(Uuid(as_uuid=True), ForeignKey("user.id"), nullable=False, index=True)

    # Relationships
    members = relationship(
        "ProjectMember", back_populates="project", lazy="raise", passive_deletes=True
    )
    tasks = relationship(
        "Task", back_populates="project", lazy="raise", passive_deletes=True
    )

    def __repr__(self):
        return f"<Project {self.name}>"
