from taskboard.schemas.token import LoginRequest, ProjectAccessToken
from taskboard.schemas.user import User, UserCreate, UserUpdate, UserSummary
from taskboard.schemas.project import (
    Project,
    ProjectCreate,
    ProjectDeleteSummary,
)
from taskboard.schemas.project_member import (
    InvitationResult,
    MemberInvite,
    MemberJoin,
    MemberPermissions,
    MemberVerify,
    ProjectMember,
)
from taskboard.schemas.task import Task, TaskAssign, TaskCreate, TaskMove, TaskWithAssignee
from taskboard.schemas.views import MyProject, ProjectMemberView, TeamMember
