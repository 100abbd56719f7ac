"""Initial schema: users, projects, memberships and tasks.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-18

At most one membership per (project, user) is enforced by
uq_projectmember_project_user.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "user",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=True),
        sa.Column("role", sa.Enum("user", "admin", name="user_role"), nullable=False),
        sa.Column("is_email_verified", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_user_email", "user", ["email"], unique=True)

    op.create_table(
        "project",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_by", sa.Uuid(), sa.ForeignKey("user.id"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_project_name", "project", ["name"])
    op.create_index("ix_project_created_by", "project", ["created_by"])

    op.create_table(
        "projectmember",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("project_id", sa.Uuid(), sa.ForeignKey("project.id"), nullable=False),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("role", sa.Enum("admin", "member", name="member_role"), nullable=False),
        sa.Column("status", sa.Enum("invited", "active", name="member_status"), nullable=False),
        sa.Column("permissions", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("project_id", "user_id", name="uq_projectmember_project_user"),
    )
    op.create_index("ix_projectmember_project_id", "projectmember", ["project_id"])
    op.create_index("ix_projectmember_user_id", "projectmember", ["user_id"])

    op.create_table(
        "task",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("title", sa.String(255), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column(
            "status", sa.Enum("todo", "inprogress", "done", name="task_status"), nullable=False
        ),
        sa.Column("project_id", sa.Uuid(), sa.ForeignKey("project.id"), nullable=False),
        sa.Column("assigned_to", sa.Uuid(), sa.ForeignKey("user.id"), nullable=True),
        sa.Column("created_by", sa.Uuid(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_task_project_id", "task", ["project_id"])
    op.create_index("ix_task_project_status_order", "task", ["project_id", "status", "order"])


def downgrade() -> None:
    op.drop_table("task")
    op.drop_table("projectmember")
    op.drop_table("project")
    op.drop_table("user")
    for enum_name in ("task_status", "member_status", "member_role", "user_role"):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
