from typing import AsyncGenerator, List

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from taskboard import crud
from taskboard.db.session import get_db
from taskboard.main import app
from taskboard.models import Base, Project, User
from taskboard.schemas.project import ProjectCreate
from taskboard.schemas.user import UserCreate
from taskboard.services.project_service import ProjectService


# Use an in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class FakeEmailSender:
    """Collects outgoing mail instead of talking to SMTP."""

    def __init__(self):
        self.sent: List[dict] = []

    def send(self, to_address: str, subject: str, html_body: str) -> str:
        self.sent.append({"to": to_address, "subject": subject, "html": html_body})
        return f"<message-{len(self.sent)}@test>"


@pytest.fixture
async def engine():
    test_engine = create_async_engine(
        TEST_DATABASE_URL, poolclass=StaticPool, future=True
    )

    # SQLite leaves foreign keys off unless asked per connection
    @event.listens_for(test_engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def email_sender() -> FakeEmailSender:
    return FakeEmailSender()


async def make_user(
    db: AsyncSession, email: str, role: str = "user", name: str = None
) -> User:
    return await crud.user.create(
        db,
        obj_in=UserCreate(
            email=email,
            password="s3cret-pass",
            name=name or email.split("@")[0].title(),
            role=role,
        ),
    )


async def make_project(db: AsyncSession, owner: User, name: str = "Board") -> Project:
    return await ProjectService(db).create(
        ProjectCreate(name=name, description=f"{name} description"), owner.id
    )


@pytest.fixture
async def admin(db_session) -> User:
    return await make_user(db_session, "alice@example.com", role="admin", name="Alice")


@pytest.fixture
async def bob(db_session) -> User:
    return await make_user(db_session, "bob@example.com", name="Bob")


@pytest.fixture
async def carol(db_session) -> User:
    return await make_user(db_session, "carol@example.com", name="Carol")


@pytest.fixture
async def project(db_session, admin) -> Project:
    return await make_project(db_session, admin)


@pytest.fixture
async def client(session_factory, email_sender) -> AsyncGenerator[AsyncClient, None]:
    from taskboard.api import deps

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[deps.get_email_sender] = lambda: email_sender
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac
    app.dependency_overrides.clear()
