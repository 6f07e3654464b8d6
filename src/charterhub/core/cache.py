"""Refresh-token blacklist backed by Redis.

The database is authoritative for revocation. The blacklist only lets the
refresh endpoint reject a revoked token without a row lock.
"""

from src.charterhub.core.redis import get_redis

PREFIX_REFRESH_BLACKLIST = "charterhub:refresh_blacklist"


def _key(token_hash: str) -> str:
    return f"{PREFIX_REFRESH_BLACKLIST}:{token_hash}"


async def is_token_blacklisted(token_hash: str) -> bool | None:
    """Check if a refresh-token hash is blacklisted.

    Returns:
        True if revoked, False if Redis confirmed it is not, None if Redis is
        unavailable and the caller must check the database.
    """
    redis = await get_redis()
    if not redis:
        return None
    return await redis.get(_key(token_hash)) is not None


async def blacklist_tokens(token_hashes: list[str], ttl: int) -> int:
    """Blacklist refresh-token hashes for ``ttl`` seconds.

    Returns:
        Number of hashes written (0 if Redis is unavailable).
    """
    if not token_hashes or ttl <= 0:
        return 0
    redis = await get_redis()
    if not redis:
        return 0

    pipe = redis.pipeline()
    for token_hash in token_hashes:
        pipe.setex(_key(token_hash), ttl, "1")
    await pipe.execute()
    return len(token_hashes)
