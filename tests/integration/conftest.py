"""Integration test fixtures for database and HTTP client operations.

Each test gets its own SQLite database file. Transactions start with
``BEGIN IMMEDIATE`` so concurrent sessions serialize on the write lock the
way row locks serialize them on PostgreSQL, and SAVEPOINTs work under
aiosqlite.
"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

from src.charterhub.api.dependencies.db import get_db_session
from src.charterhub.core.db import create_session_factory
from src.charterhub.main import create_app
from src.charterhub.models import Invitation, User
from tests.factories import DEFAULT_TEST_PASSWORD, InvitationFactory, UserFactory
from tests.helpers import login, seed


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine]:
    """Create a file-backed SQLite engine with the full schema."""
    test_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'charterhub.db'}",
        poolclass=NullPool,
        connect_args={"timeout": 15},
    )

    @event.listens_for(test_engine.sync_engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(test_engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory configured like the application's.

    IMPORTANT: a session holds the database write lock from its first
    statement until commit, rollback or close. Open sessions with
    ``async with`` and never keep one open across a service or HTTP call.
    """
    return create_session_factory(engine)


@pytest.fixture
def app(session_factory: async_sessionmaker[AsyncSession]) -> FastAPI:
    application = create_app()

    async def _override_db_session() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            yield session

    application.dependency_overrides[get_db_session] = _override_db_session
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
async def test_user(session_factory: async_sessionmaker[AsyncSession]) -> User:
    """An active, verified client account."""
    (user,) = await seed(session_factory, UserFactory.build())
    return user


@pytest.fixture
async def test_staff(session_factory: async_sessionmaker[AsyncSession]) -> User:
    """A staff account allowed to issue invitations."""
    (user,) = await seed(session_factory, UserFactory.staff())
    return user


@pytest.fixture
async def placeholder_customer(session_factory: async_sessionmaker[AsyncSession]) -> User:
    """An invited customer that has not registered yet."""
    (user,) = await seed(
        session_factory,
        UserFactory.placeholder(first_name="Ada", last_name="Lovelace", display_name=""),
    )
    return user


@pytest.fixture
async def open_invitation(
    session_factory: async_sessionmaker[AsyncSession], placeholder_customer: User
) -> Invitation:
    """An open invitation for ``placeholder_customer``."""
    (invitation,) = await seed(
        session_factory,
        InvitationFactory.build(
            customer_id=placeholder_customer.id, email=placeholder_customer.email
        ),
    )
    return invitation


@pytest.fixture
async def staff_headers(client: AsyncClient, test_staff: User) -> dict[str, str]:
    tokens = await login(client, test_staff.email, DEFAULT_TEST_PASSWORD)
    return {"Authorization": f"Bearer {tokens['access_token']}"}


@pytest.fixture
async def user_tokens(client: AsyncClient, test_user: User) -> dict[str, str]:
    return await login(client, test_user.email, DEFAULT_TEST_PASSWORD)
