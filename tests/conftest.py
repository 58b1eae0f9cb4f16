"""Shared test fixtures."""

import os

# Settings() requires JWT_SECRET at import time
os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")

from collections.abc import AsyncGenerator, Iterator  # noqa: E402
from unittest.mock import AsyncMock  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from src.ec_common.database import get_db_session  # noqa: E402
from src.main import app  # noqa: E402


@pytest.fixture
def db_session() -> AsyncMock:
    """Stand-in AsyncSession: commit/rollback are awaitable no-ops."""
    return AsyncMock()


@pytest.fixture
def override_db(db_session: AsyncMock) -> Iterator[AsyncMock]:
    """Route get_db_session to the mock session for the duration of a test."""

    async def _get_db() -> AsyncGenerator[AsyncMock, None]:
        yield db_session

    app.dependency_overrides[get_db_session] = _get_db
    yield db_session
    app.dependency_overrides.pop(get_db_session, None)


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
