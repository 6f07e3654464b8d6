"""Optional Redis client.

Redis only backs the refresh-token blacklist and the rate limiter. When
REDIS_URL is unset or the server is unreachable, ``get_redis`` returns None and
callers fall back to the database.
"""

from dataclasses import dataclass

from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import RedisError

from src.charterhub.core.config import get_settings
from src.charterhub.core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class _RedisState:
    client: Redis | None = None
    pool: ConnectionPool | None = None
    # Set once a connection was tried; cleared by close_redis
    resolved: bool = False


_state = _RedisState()


async def _connect(url: str, max_connections: int) -> Redis | None:
    pool = ConnectionPool.from_url(url, max_connections=max_connections, decode_responses=True)
    client = Redis(connection_pool=pool)
    try:
        await client.ping()  # type: ignore[misc]
    except (RedisError, OSError) as e:
        logger.warning("Redis unreachable, blacklist falls back to the database", error=str(e))
        await client.aclose()
        await pool.disconnect()
        return None

    _state.pool = pool
    logger.info("Redis connected", max_connections=max_connections)
    return client


async def get_redis() -> Redis | None:
    """Return the shared Redis client, connecting lazily on first use.

    A failed connection is not retried until ``close_redis`` resets state.
    """
    if _state.client is not None or _state.resolved:
        return _state.client

    _state.resolved = True
    settings = get_settings()
    if not settings.redis_url:
        logger.info("Redis not configured (REDIS_URL not set)")
        return None

    _state.client = await _connect(settings.redis_url, settings.redis_pool_size)
    return _state.client


async def close_redis() -> None:
    """Close the client and its pool. Called during application shutdown."""
    if _state.client is not None:
        await _state.client.aclose()
    if _state.pool is not None:
        await _state.pool.disconnect()
    _state.client = None
    _state.pool = None
    _state.resolved = False


def set_redis(client: Redis | None) -> None:
    """Install a ready-made client (tests use fakeredis)."""
    _state.client = client
    _state.pool = None
    _state.resolved = True
