from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, UUID4

from taskboard.schemas.user import UserSummary

TaskStatus = Literal["todo", "inprogress", "done"]


class TaskBase(BaseModel):
    title: Optional[str] = None
    description: str
    status: TaskStatus = "todo"


class TaskCreate(TaskBase):
    project_id: UUID4
    assigned_to: Optional[UUID4] = None


class TaskMove(BaseModel):
    new_status: TaskStatus


class TaskAssign(BaseModel):
    assigned_to: UUID4


class TaskInDBBase(TaskBase):
    id: UUID4
    project_id: UUID4
    assigned_to: Optional[UUID4] = None
    created_by: UUID4
    order: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class Task(TaskInDBBase):
    pass


class TaskWithAssignee(TaskInDBBase):
    assigned_user: Optional[UserSummary] = None
