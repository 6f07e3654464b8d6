"""Async engine for the CharterHub database."""

import ssl
from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from src.charterhub.core.config import Settings, get_settings

_engine: AsyncEngine | None = None


def build_ssl_context(mode: str) -> ssl.SSLContext | None:
    """Map a libpq-style sslmode onto an SSLContext for asyncpg."""
    if mode == "disable":
        return None
    context = ssl.create_default_context()
    if mode in ("verify-ca", "verify-full"):
        context.verify_mode = ssl.CERT_REQUIRED
        context.check_hostname = mode == "verify-full"
    else:
        # prefer/require encrypt without verifying the server certificate
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


def engine_options(settings: Settings) -> dict[str, Any]:
    """Keyword arguments for ``create_async_engine``.

    Pool sizing and asyncpg connect arguments only apply to Postgres; the
    SQLite URLs used in tests get SQLAlchemy's defaults.
    """
    if not settings.uses_asyncpg:
        return {}

    connect_args: dict[str, Any] = {
        "statement_cache_size": settings.database_statement_cache_size,
    }
    ssl_context = build_ssl_context(settings.database_ssl_mode)
    if ssl_context is not None:
        connect_args["ssl"] = ssl_context

    return {
        "pool_size": settings.database_pool_size,
        "max_overflow": settings.database_max_overflow,
        "pool_pre_ping": True,
        "connect_args": connect_args,
    }


def get_engine() -> AsyncEngine:
    """Return the process-wide engine, creating it on first use."""
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = create_async_engine(settings.database_url, **engine_options(settings))
    return _engine


async def dispose_engine() -> None:
    global _engine
    if _engine is not None:
        await _engine.dispose()
        _engine = None
