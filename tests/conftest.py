"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import StaticPool
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from github_plugin.db.base import Base
from github_plugin.db.session import get_db
from github_plugin.main import app
from github_plugin.models.connection import GithubConnection
from github_plugin.models.repo import GithubRepo

# Use SQLite for testing (simpler than spinning up postgres)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="function")
async def async_engine():
    """Create async test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture(scope="function")
def session_maker(async_engine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


@pytest.fixture(scope="function")
async def async_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Create async database session for tests."""
    async with session_maker() as session:
        yield session


@pytest.fixture(scope="function")
async def client(async_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create an HTTP client for the app with the test session injected."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield async_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
async def github_connection(async_session: AsyncSession) -> GithubConnection:
    """Create a GitHub connection with id 7."""
    connection = GithubConnection(id=7, name="github-cloud")
    async_session.add(connection)
    await async_session.commit()
    await async_session.refresh(connection)
    return connection


@pytest.fixture
async def other_connection(async_session: AsyncSession) -> GithubConnection:
    """Create a second GitHub connection."""
    connection = GithubConnection(
        id=8,
        name="github-enterprise",
        endpoint="https://github.example.com/api/v3/",
    )
    async_session.add(connection)
    await async_session.commit()
    await async_session.refresh(connection)
    return connection


@pytest.fixture
async def github_repo(
    async_session: AsyncSession, github_connection: GithubConnection
) -> GithubRepo:
    """Create a repository scope without a scope configuration."""
    repo = GithubRepo(
        connection_id=github_connection.id,
        github_id=134018330,
        name="incubator-devlake",
        full_name="apache/incubator-devlake",
    )
    async_session.add(repo)
    await async_session.commit()
    await async_session.refresh(repo)
    return repo
