"""
Wallit Users — Test Configuration (conftest.py)
================================================

What:  Shared pytest fixtures for the test suite.

Fixtures:
    ├── mock_db_session: AsyncMock session for service unit tests
    ├── sample_user: Registration payload
    ├── database: Database handle on a temporary SQLite file, tables created
    └── test_client: HTTPX AsyncClient wired to an app using `database`
"""

import os

# Must run before any wallit import: settings and the service singleton read
# these at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"  # bcrypt minimum keeps the suite fast
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from wallit.database import Database


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_lookup(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = user
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def sample_user():
    """A complete, valid registration payload."""
    return {
        "firstname": "Jane",
        "lastname": "Doe",
        "email": "jane.doe@wallit.io",
        "password": "s3cret-Passw0rd",
    }


@pytest_asyncio.fixture
async def database(tmp_path):
    """A Database handle on a fresh SQLite file with the schema created."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'wallit_test.db'}")
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def test_client(database):
    """
    Async HTTP client talking to an app bound to the `database` fixture.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from wallit.main import create_app

    app = create_app(database=database)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
