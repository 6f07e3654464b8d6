"""Session factory for units of work."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from src.charterhub.core.db.engine import get_engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Sessions keep attributes after commit and never autoflush.

    Services flush explicitly when they need generated ids, so queries issued
    mid-transaction see exactly what was staged.
    """
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


@asynccontextmanager
async def get_session(engine: AsyncEngine | None = None) -> AsyncGenerator[AsyncSession]:
    """Open one session; uncommitted work is rolled back when it closes."""
    factory = create_session_factory(engine or get_engine())
    async with factory() as session:
        yield session
