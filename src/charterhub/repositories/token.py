"""Refresh-token rows. Only SHA-256 hashes are stored; rows are revoked, never deleted."""

from typing import Any, cast

from sqlalchemy import ColumnElement, and_, update
from sqlalchemy.engine import CursorResult
from sqlmodel import col, select

from src.charterhub.models.auth import RefreshToken
from src.charterhub.models.base import utc_now
from src.charterhub.repositories.base import BaseRepository


def live_clause() -> ColumnElement[bool]:
    """Not revoked and not yet expired."""
    return and_(col(RefreshToken.revoked).is_(False), col(RefreshToken.expires_at) > utc_now())


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    model = RefreshToken

    async def get_by_hash(self, token_hash: str) -> RefreshToken | None:
        """Look up a token by hash whatever its state."""
        result = await self.session.execute(
            select(RefreshToken).where(RefreshToken.token_hash == token_hash)
        )
        return result.scalar_one_or_none()

    async def get_valid_by_hash(
        self, token_hash: str, for_update: bool = False
    ) -> RefreshToken | None:
        """Look up a live token by hash.

        ``for_update`` locks the row so two concurrent refreshes cannot both
        exchange the same token.
        """
        query = select(RefreshToken).where(RefreshToken.token_hash == token_hash, live_clause())
        if for_update:
            query = query.with_for_update()
        return (await self.session.execute(query)).scalar_one_or_none()

    async def get_active_for_user(self, user_id: int) -> list[RefreshToken]:
        result = await self.session.execute(
            select(RefreshToken).where(RefreshToken.user_id == user_id, live_clause())
        )
        return list(result.scalars())

    async def revoke(self, token: RefreshToken) -> None:
        token.revoked = True
        token.revoked_at = utc_now()
        self.session.add(token)

    async def revoke_all_for_user(self, user_id: int) -> int:
        """Mark every unrevoked token of the user revoked. Returns the row count."""
        result = await self.session.execute(
            update(RefreshToken)
            .where(col(RefreshToken.user_id) == user_id, col(RefreshToken.revoked).is_(False))
            .values(revoked=True, revoked_at=utc_now())
        )
        return cast(CursorResult[Any], result).rowcount or 0
