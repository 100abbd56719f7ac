import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from taskboard import crud
from taskboard.core.errors import ConflictError, ForbiddenError, NotFoundError
from taskboard.crud.crud_project_member import CRUDProjectMember
from taskboard.models import ProjectMember
from taskboard.services.membership_service import MembershipService
from taskboard.services.task_service import TaskService


class StaleLookupMembers(CRUDProjectMember):
    """Misses existing rows, as a lookup racing a concurrent insert would."""

    async def get_by_project_and_user(self, db, *, project_id, user_id, status=None, role=None):
        return None


async def _count_rows(db, project_id, user_id) -> int:
    result = await db.execute(
        select(func.count()).select_from(ProjectMember).filter(
            ProjectMember.project_id == project_id, ProjectMember.user_id == user_id
        )
    )
    return result.scalar_one()


async def test_project_creator_is_active_admin(db_session, admin, project):
    service = MembershipService(db_session)

    member = await service.require_active_admin(project.id, admin.id)

    assert member.role == "admin"
    assert member.status == "active"
    assert member.permissions == {"create_tasks": True, "assign_tasks": False}


async def test_invite_creates_invited_member(db_session, project, bob):
    member = await MembershipService(db_session).invite(project.id, bob.id)

    assert member.status == "invited"
    assert member.role == "member"


async def test_invited_member_fails_both_gates(db_session, project, bob):
    service = MembershipService(db_session)
    await service.invite(project.id, bob.id, role="admin")

    with pytest.raises(ForbiddenError):
        await service.require_active_member(project.id, bob.id)
    with pytest.raises(ForbiddenError):
        await service.require_active_admin(project.id, bob.id)


async def test_active_member_is_not_admin(db_session, project, bob):
    service = MembershipService(db_session)
    await service.invite(project.id, bob.id)
    await service.activate(project.id, bob.id)

    assert (await service.require_active_member(project.id, bob.id)).user_id == bob.id
    with pytest.raises(ForbiddenError):
        await service.require_active_admin(project.id, bob.id)


async def test_stranger_is_forbidden(db_session, project, carol):
    with pytest.raises(ForbiddenError):
        await MembershipService(db_session).require_active_member(project.id, carol.id)


@pytest.mark.parametrize("activate_first", [False, True])
async def test_reinvite_conflicts_regardless_of_status(db_session, project, bob, activate_first):
    service = MembershipService(db_session)
    await service.invite(project.id, bob.id)
    if activate_first:
        await service.activate(project.id, bob.id)

    with pytest.raises(ConflictError):
        await service.invite(project.id, bob.id, role="admin")

    assert await _count_rows(db_session, project.id, bob.id) == 1
    member = await crud.project_member.get_by_project_and_user(
        db_session, project_id=project.id, user_id=bob.id
    )
    assert member.role == "member"


async def test_inviting_the_owner_conflicts(db_session, project, admin):
    with pytest.raises(ConflictError):
        await MembershipService(db_session).invite(project.id, admin.id)


async def test_activate_twice_leaves_one_active_row(db_session, project, bob):
    service = MembershipService(db_session)
    await service.invite(project.id, bob.id)

    first = await service.activate(project.id, bob.id)
    second = await service.activate(project.id, bob.id)

    assert first.id == second.id
    assert second.status == "active"
    assert await _count_rows(db_session, project.id, bob.id) == 1


async def test_activate_without_invitation_creates_active_member(db_session, project, carol):
    service = MembershipService(db_session)

    member = await service.activate(project.id, carol.id)
    again = await service.activate(project.id, carol.id)

    assert member.status == "active"
    assert member.role == "member"
    assert again.id == member.id
    assert await _count_rows(db_session, project.id, carol.id) == 1


async def test_activate_keeps_invited_role(db_session, project, bob):
    service = MembershipService(db_session)
    await service.invite(project.id, bob.id, role="admin")

    member = await service.activate(project.id, bob.id)

    assert member.role == "admin"
    assert (await service.require_active_admin(project.id, bob.id)).id == member.id


async def test_unique_constraint_backs_membership_uniqueness(db_session, project, admin):
    db_session.add(ProjectMember(
        project_id=project.id, user_id=admin.id, role="member", status="invited",
        permissions={"create_tasks": True, "assign_tasks": False},
    ))
    with pytest.raises(IntegrityError):
        await db_session.commit()


async def test_activate_for_deleted_project_is_not_found(db_session, admin, project, bob):
    project_id, bob_id = project.id, bob.id
    await MembershipService(db_session).invite(project_id, bob_id)
    await TaskService(db_session).delete_project_cascade(admin.id, project_id)

    with pytest.raises(NotFoundError):
        await MembershipService(db_session).activate(project_id, bob_id)

    assert await _count_rows(db_session, project_id, bob_id) == 0


async def test_invite_race_on_unique_constraint_is_conflict(db_session, project, admin):
    project_id, admin_id = project.id, admin.id
    service = MembershipService(db_session, members=StaleLookupMembers(ProjectMember))

    with pytest.raises(ConflictError):
        await service.invite(project_id, admin_id)

    assert await _count_rows(db_session, project_id, admin_id) == 1
