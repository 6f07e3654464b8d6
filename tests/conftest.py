"""Environment and Redis fixtures for unit and integration tests.

The SQLite engine, app client and seeded accounts live in
tests/integration/conftest.py.
"""

import os

# Configure the test environment before any app imports: rate limiting off,
# cheap argon2 parameters, and a placeholder database URL (integration tests
# bind their own SQLite engine).
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-that-is-at-least-32-characters-long")
os.environ.setdefault("ARGON2_TIME_COST", "1")
os.environ.setdefault("ARGON2_MEMORY_COST", "1024")
os.environ.setdefault("DATABASE_SSL_MODE", "disable")

# ruff: noqa: E402 - Imports must be after env var setup
from collections.abc import AsyncGenerator

import pytest
from fakeredis import aioredis as fakeredis_aio
from redis.asyncio import Redis

from src.charterhub.core import redis as redis_core
from src.charterhub.core.audit_context import clear_audit_context
from src.charterhub.core.config import get_settings

get_settings.cache_clear()


@pytest.fixture(autouse=True)
async def _redis_unavailable_by_default() -> AsyncGenerator[None]:
    """Tests run without Redis unless they request ``mock_redis``."""
    redis_core.set_redis(None)
    clear_audit_context()
    yield
    redis_core.set_redis(None)
    clear_audit_context()


@pytest.fixture
async def fake_redis() -> AsyncGenerator[Redis]:
    """In-memory Redis speaking the real client protocol."""
    client = fakeredis_aio.FakeRedis(decode_responses=True)
    yield client
    await client.aclose()


@pytest.fixture
def mock_redis(fake_redis: Redis) -> Redis:
    """Install fakeredis as the shared Redis client."""
    redis_core.set_redis(fake_redis)
    return fake_redis
