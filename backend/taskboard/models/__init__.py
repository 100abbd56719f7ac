from taskboard.models.base import Base
from taskboard.models.user import User, USER_ROLES
from taskboard.models.project import Project
from taskboard.models.project_member import ProjectMember, MEMBER_ROLES, MEMBER_STATUSES
from taskboard.models.task import Task, TASK_STATUSES
