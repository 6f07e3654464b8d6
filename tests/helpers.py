"""Test helper functions for common data creation patterns."""

from typing import Any

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import SQLModel, col, select

from src.charterhub.models import AuditLog, Invitation, RefreshToken


async def seed[T: SQLModel](
    session_factory: async_sessionmaker[AsyncSession], *objects: T
) -> list[T]:
    """Persist ``objects`` in a short-lived session and return them.

    Objects stay usable after the session closes (expire_on_commit=False).
    """
    async with session_factory() as session:
        for obj in objects:
            session.add(obj)
            # Flush one by one so autoincrement ids follow argument order
            await session.flush()
        await session.commit()
    return list(objects)


async def get_invitation(
    session_factory: async_sessionmaker[AsyncSession], token: str
) -> Invitation | None:
    async with session_factory() as session:
        result = await session.execute(select(Invitation).where(Invitation.token == token))
        return result.scalar_one_or_none()


async def get_row[T: SQLModel](
    session_factory: async_sessionmaker[AsyncSession], model: type[T], pk: Any
) -> T | None:
    async with session_factory() as session:
        return await session.get(model, pk)


async def audit_rows(
    session_factory: async_sessionmaker[AsyncSession], action: str | None = None
) -> list[AuditLog]:
    async with session_factory() as session:
        query = select(AuditLog).order_by(col(AuditLog.created_at))
        if action is not None:
            query = query.where(AuditLog.action == action)
        result = await session.execute(query)
        return list(result.scalars().all())


async def refresh_rows(
    session_factory: async_sessionmaker[AsyncSession], user_id: int
) -> list[RefreshToken]:
    async with session_factory() as session:
        result = await session.execute(
            select(RefreshToken)
            .where(RefreshToken.user_id == user_id)
            .order_by(col(RefreshToken.issued_at))
        )
        return list(result.scalars().all())


async def login(client: AsyncClient, email: str, password: str) -> dict[str, str]:
    """Log in through the API and return the credential pair."""
    response = await client.post(
        "/api/v1/auth/login", json={"email": email, "password": password}
    )
    assert response.status_code == 200, response.text
    return response.json()["tokens"]


def bearer(access_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {access_token}"}
