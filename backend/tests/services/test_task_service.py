import uuid

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from taskboard import crud
from taskboard.core.errors import (
    ForbiddenError,
    InternalError,
    InvalidAssigneeError,
    NotFoundError,
)
from taskboard.crud.crud_project_member import CRUDProjectMember
from taskboard.models import Project, ProjectMember, Task
from taskboard.schemas.task import TaskCreate
from taskboard.services.membership_service import MembershipService
from taskboard.services.task_service import TaskService
from tests.conftest import make_project


class FailingMembers(CRUDProjectMember):
    async def remove_by_project(self, db, *, project_id):
        raise SQLAlchemyError("disk I/O error")


def _task_in(project, status="todo", **kwargs) -> TaskCreate:
    return TaskCreate(
        project_id=project.id,
        title=kwargs.pop("title", None),
        description=kwargs.pop("description", "Write the thing"),
        status=status,
        **kwargs,
    )


async def _join(db, project, user):
    membership = MembershipService(db)
    await membership.invite(project.id, user.id)
    return await membership.activate(project.id, user.id)


async def test_first_task_in_column_gets_order_zero(db_session, admin, project):
    task = await TaskService(db_session).create(_task_in(project), admin.id)

    assert task.order == 0
    assert task.status == "todo"
    assert task.created_by == admin.id
    assert task.assigned_to is None


async def test_order_increases_within_column(db_session, admin, project):
    service = TaskService(db_session)

    orders = [(await service.create(_task_in(project), admin.id)).order for _ in range(4)]

    assert orders == [0, 1, 2, 3]


async def test_columns_are_ordered_independently(db_session, admin, project):
    service = TaskService(db_session)
    await service.create(_task_in(project, "todo"), admin.id)
    await service.create(_task_in(project, "todo"), admin.id)

    done = await service.create(_task_in(project, "done"), admin.id)

    assert done.order == 0


async def test_columns_are_scoped_per_project(db_session, admin, project):
    other = await make_project(db_session, admin, name="Other")
    service = TaskService(db_session)
    await service.create(_task_in(project), admin.id)

    task = await service.create(_task_in(other), admin.id)

    assert task.order == 0


async def test_create_requires_active_membership(db_session, project, bob):
    await MembershipService(db_session).invite(project.id, bob.id)

    with pytest.raises(ForbiddenError):
        await TaskService(db_session).create(_task_in(project), bob.id)


async def test_create_ignores_create_tasks_permission(db_session, project, bob):
    member = await _join(db_session, project, bob)
    await crud.project_member.update(
        db_session, db_obj=member,
        obj_in={"permissions": {"create_tasks": False, "assign_tasks": False}},
    )

    task = await TaskService(db_session).create(_task_in(project), bob.id)

    assert task.created_by == bob.id


async def test_create_preassigned(db_session, admin, project, bob):
    task = await TaskService(db_session).create(
        _task_in(project, assigned_to=bob.id), admin.id
    )

    assert task.assigned_to == bob.id


async def test_list_sorted_by_order_with_assignee_snapshot(db_session, admin, project, bob):
    await _join(db_session, project, bob)
    service = TaskService(db_session)
    first = await service.create(_task_in(project, title="first"), admin.id)
    second = await service.create(_task_in(project, title="second"), admin.id)
    await service.assign(second.id, bob.id, admin.id)
    await service.move_to_column(first.id, "todo")

    tasks = await service.list_by_project(project.id, bob.id)

    assert [t.title for t in tasks] == ["second", "first"]
    assert [t.order for t in tasks] == [1, 2]
    assert tasks[0].assigned_user.id == bob.id
    assert tasks[0].assigned_user.name == "Bob"
    assert tasks[0].assigned_user.email == "bob@example.com"
    assert tasks[0].assigned_user.role == "user"
    assert tasks[1].assigned_user is None


async def test_list_requires_active_membership(db_session, project, carol):
    with pytest.raises(ForbiddenError):
        await TaskService(db_session).list_by_project(project.id, carol.id)


async def test_move_appends_to_target_column(db_session, admin, project):
    service = TaskService(db_session)
    await service.create(_task_in(project, "done"), admin.id)
    await service.create(_task_in(project, "done"), admin.id)
    task = await service.create(_task_in(project, "todo"), admin.id)

    moved = await service.move_to_column(task.id, "done")

    assert moved.status == "done"
    assert moved.order == 2


async def test_move_to_empty_column_starts_at_zero(db_session, admin, project):
    service = TaskService(db_session)
    task = await service.create(_task_in(project, "todo"), admin.id)

    moved = await service.move_to_column(task.id, "inprogress")

    assert moved.order == 0


async def test_move_within_same_column_appends_without_renumbering(db_session, admin, project):
    service = TaskService(db_session)
    a = await service.create(_task_in(project), admin.id)
    b = await service.create(_task_in(project), admin.id)

    moved = await service.move_to_column(a.id, "todo")

    assert moved.order == 2
    assert (await crud.task.get(db_session, id=b.id)).order == 1


async def test_move_unknown_task(db_session):
    with pytest.raises(NotFoundError):
        await TaskService(db_session).move_to_column(uuid.uuid4(), "done")


async def test_move_does_not_check_caller_membership(db_session, admin, project, carol):
    # Current behaviour: the caller identity is not consulted when moving.
    task = await TaskService(db_session).create(_task_in(project), admin.id)

    moved = await TaskService(db_session).move_to_column(task.id, "inprogress")

    assert moved.status == "inprogress"
    with pytest.raises(ForbiddenError):
        await MembershipService(db_session).require_active_member(project.id, carol.id)


async def test_assign_to_active_member(db_session, admin, project, bob):
    await _join(db_session, project, bob)
    service = TaskService(db_session)
    task = await service.create(_task_in(project), admin.id)

    assigned = await service.assign(task.id, bob.id, admin.id)

    assert assigned.assigned_to == bob.id


async def test_member_without_assign_permission_can_assign(db_session, admin, project, bob):
    await _join(db_session, project, bob)
    service = TaskService(db_session)
    task = await service.create(_task_in(project), admin.id)

    assigned = await service.assign(task.id, admin.id, bob.id)

    assert assigned.assigned_to == admin.id


@pytest.mark.parametrize("assignee_state", ["stranger", "invited"])
async def test_assign_to_non_active_member_is_invalid(
    db_session, admin, project, carol, assignee_state
):
    if assignee_state == "invited":
        await MembershipService(db_session).invite(project.id, carol.id)
    service = TaskService(db_session)
    task = await service.create(_task_in(project), admin.id)

    with pytest.raises(InvalidAssigneeError):
        await service.assign(task.id, carol.id, admin.id)

    assert (await crud.task.get(db_session, id=task.id)).assigned_to is None


async def test_assign_to_member_of_another_project_is_invalid(db_session, admin, project, bob):
    other = await make_project(db_session, admin, name="Other")
    await _join(db_session, other, bob)
    service = TaskService(db_session)
    task = await service.create(_task_in(project), admin.id)

    with pytest.raises(InvalidAssigneeError):
        await service.assign(task.id, bob.id, admin.id)


async def test_assign_requires_active_requestor(db_session, admin, project, bob, carol):
    await _join(db_session, project, bob)
    service = TaskService(db_session)
    task = await service.create(_task_in(project), admin.id)

    with pytest.raises(ForbiddenError):
        await service.assign(task.id, bob.id, carol.id)


async def test_assign_unknown_task(db_session, admin):
    with pytest.raises(NotFoundError):
        await TaskService(db_session).assign(uuid.uuid4(), admin.id, admin.id)


async def _count(db, model, project_id) -> int:
    column = model.id if model is Project else model.project_id
    result = await db.execute(select(func.count()).select_from(model).filter(column == project_id))
    return result.scalar_one()


async def test_cascade_removes_tasks_members_and_project(db_session, admin, project, bob):
    await _join(db_session, project, bob)
    service = TaskService(db_session)
    await service.create(_task_in(project), admin.id)
    await service.create(_task_in(project, "done"), admin.id)

    summary = await service.delete_project_cascade(admin.id, project.id)

    assert summary.deleted_tasks == 2
    assert summary.deleted_members == 2
    assert await _count(db_session, Task, project.id) == 0
    assert await _count(db_session, ProjectMember, project.id) == 0
    assert await _count(db_session, Project, project.id) == 0


async def test_cascade_leaves_other_projects_alone(db_session, admin, project):
    other = await make_project(db_session, admin, name="Other")
    service = TaskService(db_session)
    await service.create(_task_in(other), admin.id)

    await service.delete_project_cascade(admin.id, project.id)

    assert await _count(db_session, Task, other.id) == 1
    assert await _count(db_session, ProjectMember, other.id) == 1


async def test_cascade_requires_admin(db_session, admin, project, bob):
    await _join(db_session, project, bob)

    with pytest.raises(ForbiddenError):
        await TaskService(db_session).delete_project_cascade(bob.id, project.id)

    assert await _count(db_session, Project, project.id) == 1


async def test_cascade_unknown_project(db_session, admin):
    with pytest.raises(NotFoundError):
        await TaskService(db_session).delete_project_cascade(admin.id, uuid.uuid4())


async def test_board_walkthrough(db_session, admin, project, bob):
    membership = MembershipService(db_session)
    service = TaskService(db_session)

    invited = await membership.invite(project.id, bob.id)
    assert invited.status == "invited"
    assert (await membership.activate(project.id, bob.id)).status == "active"

    t1 = await service.create(_task_in(project, title="T1"), admin.id)
    t2 = await service.create(_task_in(project, title="T2"), admin.id)
    assert (t1.order, t2.order) == (0, 1)

    t1 = await service.move_to_column(t1.id, "done")
    assert (t1.status, t1.order) == ("done", 0)

    t2 = await service.assign(t2.id, bob.id, admin.id)
    assert t2.assigned_to == bob.id

    await service.delete_project_cascade(admin.id, project.id)
    assert await crud.task.get(db_session, id=t1.id) is None
    assert await crud.task.get(db_session, id=t2.id) is None
    with pytest.raises(ForbiddenError):
        await service.list_by_project(project.id, admin.id)


async def test_cascade_failure_rolls_back_every_delete(db_session, admin, project):
    project_id, admin_id = project.id, admin.id
    task_id = (await TaskService(db_session).create(_task_in(project), admin_id)).id
    service = TaskService(db_session, members=FailingMembers(ProjectMember))

    with pytest.raises(InternalError) as exc_info:
        await service.delete_project_cascade(admin_id, project_id)

    assert exc_info.value.details == {"operation": "delete_project"}
    assert await crud.task.get(db_session, id=task_id) is not None
    assert await crud.project.get(db_session, id=project_id) is not None
    assert await crud.project_member.get_by_project_and_user(
        db_session, project_id=project_id, user_id=admin_id
    ) is not None
