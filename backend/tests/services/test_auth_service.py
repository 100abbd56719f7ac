import pytest

from taskboard.core.errors import ForbiddenError, UnauthorizedError
from taskboard.core.security import NO_PROJECT, verify_project_access_token
from taskboard.schemas.token import LoginRequest
from taskboard.services.auth_service import AuthService
from taskboard.services.user_service import UserService


async def test_login_without_project_issues_account_token(db_session, admin):
    token = await AuthService(db_session).login(
        LoginRequest(email="ALICE@example.com", password="s3cret-pass")
    )

    access = verify_project_access_token(token.access_token)
    assert access.user_id == admin.id
    assert access.project_id == NO_PROJECT
    assert token.token_type == "bearer"


async def test_login_scoped_to_project(db_session, admin, project):
    token = await AuthService(db_session).login(
        LoginRequest(email=admin.email, password="s3cret-pass", project_id=project.id)
    )

    access = verify_project_access_token(f"Bearer {token.access_token}")
    assert (access.user_id, access.project_id) == (admin.id, project.id)


async def test_login_scoped_to_foreign_project_is_forbidden(db_session, project, bob):
    with pytest.raises(ForbiddenError):
        await AuthService(db_session).login(
            LoginRequest(email=bob.email, password="s3cret-pass", project_id=project.id)
        )


@pytest.mark.parametrize("email,password", [
    ("bob@example.com", "wrong-pass"),
    ("nobody@example.com", "s3cret-pass"),
])
async def test_login_rejects_bad_credentials(db_session, bob, email, password):
    with pytest.raises(UnauthorizedError):
        await AuthService(db_session).login(LoginRequest(email=email, password=password))


async def test_placeholder_invitee_cannot_log_in(db_session):
    await UserService(db_session).get_or_create_invitee("pending@example.com")

    with pytest.raises(UnauthorizedError):
        await AuthService(db_session).authenticate("pending@example.com", "")
