from typing import Optional
from datetime import datetime

from pydantic import BaseModel, UUID4


class ProjectBase(BaseModel):
    name: str
    description: Optional[str] = None


class ProjectCreate(ProjectBase):
    pass


class ProjectInDBBase(ProjectBase):
    id: UUID4
    created_at: datetime
    updated_at: datetime
    created_by: UUID4

    class Config:
        from_attributes = True


class Project(ProjectInDBBase):
    pass


class ProjectDeleteSummary(BaseModel):
    project_id: UUID4
    deleted_tasks: int
    deleted_members: int
    message: str = "Project and all related tasks deleted successfully"
