"""
Campus Roster Backend — Test Configuration (conftest.py)
=========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── db_engine:        aiosqlite engine on a fresh file in tmp_path, tables created
    ├── session_factory:  async_sessionmaker bound to db_engine
    ├── db_session:       one AsyncSession for direct service/registry calls
    ├── seed:             inserts rows with ids 1..N and commits
    ├── read_rows:        reads (id, name) pairs back through a fresh session
    ├── mock_db_session:  AsyncMock session (no database at all)
    └── test_client:      HTTPX AsyncClient over ASGITransport, sessions from session_factory

A file database (not :memory:) is used so that separate sessions get separate
connections, which the concurrency tests rely on.
"""

import os

# Override settings for testing BEFORE any roster imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["API_PREFIX"] = "/api"
os.environ["CORS_ORIGINS"] = "*"

from typing import List, Tuple, Type  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import select  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402

from roster.database import Base, get_db_session  # noqa: E402
from roster.models.entity import SequencedEntity  # noqa: E402
# Model imports register the tables on Base.metadata
from roster.models.student import Student  # noqa: E402,F401
from roster.models.teacher import Teacher  # noqa: E402,F401


# ══════════════════════════════════════════════════════════════════════════
# Real-store Fixtures (aiosqlite)
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """Fresh SQLite database per test with the student and teacher tables."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'roster.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def seed(session_factory):
    """
    Insert one row per name with ids 1..N and commit.

    Usage:
        await seed(Student, "A", "B", "C")
    """

    async def _seed(model: Type[SequencedEntity], *names: str) -> None:
        async with session_factory() as session:
            for entity_id, name in enumerate(names, start=1):
                session.add(model(id=entity_id, name=name, class_="10A"))
            await session.commit()

    return _seed


@pytest.fixture
def read_rows(session_factory):
    """Committed (id, name) pairs of a collection, ordered by id."""

    async def _read(model: Type[SequencedEntity]) -> List[Tuple[int, str]]:
        async with session_factory() as session:
            result = await session.execute(select(model.id, model.name).order_by(model.id))
            return [(row.id, row.name) for row in result.all()]

    return _read


# ══════════════════════════════════════════════════════════════════════════
# Mocked Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("down"))
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    Async HTTP client talking to a fresh app whose sessions use the test database.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/healthz")
            assert response.status_code == 200
    """
    from roster.main import create_app

    app = create_app()

    async def override_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_db_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()

