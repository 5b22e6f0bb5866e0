"""Global pytest fixtures for the CodeHunt backend.

This module provides shared fixtures for testing including:
- Settings for the in-memory and SQLite-backed stores
- Team stores (both backends)
- The FastAPI app and an httpx client bound to it
- Registration payloads and a mock Redis client
"""

from collections.abc import AsyncGenerator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
import structlog
from httpx import ASGITransport, AsyncClient

from codehunt.config import Settings
from codehunt.main import create_app
from codehunt.store.memory import MemoryTeamStore
from codehunt.store.sql import SqlTeamStore

SQLITE_URL = "sqlite+aiosqlite:///:memory:"


# ===========================================
# LOGGING ISOLATION
# ===========================================


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Undo any structlog configuration a test (e.g. create_app) installed."""
    yield
    structlog.reset_defaults()


# ===========================================
# SETTINGS
# ===========================================


@pytest.fixture
def memory_settings() -> Settings:
    return Settings(storage_backend="memory", log_json=False, log_level="WARNING")


@pytest.fixture
def sql_settings() -> Settings:
    return Settings(
        storage_backend="sql",
        database_url=SQLITE_URL,
        log_json=False,
        log_level="WARNING",
    )


# ===========================================
# STORES
# ===========================================


@pytest_asyncio.fixture(params=["memory", "sql"])
async def team_store(request, sql_settings) -> AsyncGenerator[Any, None]:
    """Each store test runs against both backends."""
    if request.param == "memory":
        store = MemoryTeamStore()
    else:
        store = SqlTeamStore(sql_settings)
    await store.start()
    yield store
    await store.close()


# ===========================================
# APP / CLIENT
# ===========================================


@pytest.fixture
def app(memory_settings):
    return create_app(memory_settings)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """httpx client against the app. ASGITransport skips lifespan; the memory
    store needs no startup."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ===========================================
# PAYLOADS
# ===========================================


def registration_payload(name: str = "Alpha", **overrides: Any) -> dict[str, Any]:
    payload = {
        "teamName": name,
        "teamLeader": "Ada",
        "teamMembers": ["Ada", "Grace", "Linus"],
        "email": "ada@example.com",
        "theme": "AI in Education & Learning",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def team_payload() -> dict[str, Any]:
    return registration_payload()


@pytest.fixture
def make_team_payload():
    return registration_payload


# ===========================================
# REDIS MOCK
# ===========================================


@pytest.fixture
def mock_redis_client() -> MagicMock:
    """Mock Redis client whose pipeline reports ``execute`` results."""
    redis = MagicMock()
    redis.pipeline = MagicMock(return_value=redis)
    redis.execute = AsyncMock(return_value=[0, 1, 1, True])
    return redis
