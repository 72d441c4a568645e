"""
Post Service: Test Configuration (conftest.py)
================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: Mock AsyncSession (no real DB needed)
    ├── sample_post_data: Column values for a stored post
    ├── make_post: Builds Post-like mocks from sample data
    └── test_client: HTTPX AsyncClient against the app and a fresh SQLite schema
"""

import os
import tempfile
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must run before any post_api import: the engine is built at import time
_test_db_dir = tempfile.mkdtemp(prefix="post_service_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_test_db_dir}/test.db"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["DB_CREATE_TABLES"] = "false"


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_post(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = post
            result = await post_service.get_post(mock_db_session, post_id)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def sample_post_data():
    """Column values for a post as it would come back from the database."""
    now = datetime.now(timezone.utc)
    return {
        "post_id": str(uuid4()),
        "title": "Hello World",
        "content": "First post body.",
        "author": "alice",
        "slug": "hello-world",
        "create_at": now,
        "update_at": now,
    }


@pytest.fixture
def make_post(sample_post_data):
    """Factory for Post-like objects; keyword arguments override sample data."""
    def _make(**overrides):
        post = MagicMock()
        for key, value in {**sample_post_data, **overrides}.items():
            setattr(post, key, value)
        return post
    return _make


@pytest_asyncio.fixture
async def test_client():
    """
    Provides an async HTTP test client for endpoint testing.

    How:   ASGITransport routes requests straight into the app. The Post
           table is created before the test and dropped afterwards; the
           engine is disposed so no pooled connection outlives its loop.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/posts")
            assert response.status_code == 200
    """
    from post_api.database import Base, create_tables, engine
    from post_api.main import app

    await create_tables()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()
