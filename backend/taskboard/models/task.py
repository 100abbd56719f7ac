from sqlalchemy import Column, Enum, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship

from taskboard.models.base import BaseModel

TASK_STATUSES = ("todo", "inprogress", "done")


class Task(BaseModel):
    """Kanban card. ``order`` is only meaningful within its (project, status) column."""

    __table_args__ = (Index("ix_task_project_status_order", "project_id", "status", "order"),)

    title = Column(String(255), nullable=True)
    description = Column(Text, nullable=False)
    status = Column(Enum(*TASK_STATUSES, name="task_status"), default="todo", nullable=False)
    project_id = Column(Uuid(as_uuid=True), ForeignKey("project.id"), nullable=False, index=True)
    assigned_to = Column(Uuid(as_uuid=True), ForeignKey("user.id"), nullable=True)
    created_by = Column(Uuid(as_uuid=True), ForeignKey("user.id"), nullable=False)
    order = Column(Integer, default=0, nullable=False)

    # Relationships
    project = relationship("Project", back_populates="tasks", lazy="raise")

    def __repr__(self):
        return f"<Task {self.title or self.id} [{self.status}#{self.order}]>"
