"""Repository for Invitation entity."""

from datetime import datetime
from typing import Any, cast

from sqlalchemy import and_, update
from sqlalchemy.engine import CursorResult
from sqlalchemy.sql.elements import ColumnElement
from sqlmodel import col, select

from src.charterhub.models.invitation import Invitation
from src.charterhub.repositories.base import BaseRepository


def open_clause() -> ColumnElement[bool]:
    """SQL condition for an invitation that has not been consumed.

    Mirrors ``Invitation.consumed``: every legacy column must still be clear.
    """
    return and_(
        col(Invitation.is_used) == False,  # noqa: E712
        col(Invitation.used) == False,  # noqa: E712
        col(Invitation.used_at).is_(None),
    )


class InvitationRepository(BaseRepository[Invitation]):
    """Repository for Invitation entity."""

    model = Invitation

    async def get_by_token(self, token: str) -> Invitation | None:
        """Exact, case-sensitive lookup by token."""
        result = await self.session.execute(select(Invitation).where(Invitation.token == token))
        return result.scalar_one_or_none()

    async def mark_consumed(
        self, token: str, used_at: datetime, used_by_user_id: int | None = None
    ) -> int:
        """Consume an open invitation in a single UPDATE.

        The open-state check is part of the WHERE clause, so two concurrent
        callers serialize on the row lock and only one of them gets a row
        count of 1.

        Returns:
            Number of rows updated (0 if the token is unknown or already consumed).
        """
        stmt = (
            update(Invitation)
            .where(col(Invitation.token) == token)
            .where(open_clause())
            .values(
                is_used=True,
                used=True,
                used_at=used_at,
                used_by_user_id=used_by_user_id,
                updated_at=used_at,
            )
        )
        result = await self.session.execute(stmt)
        return cast(CursorResult[Any], result).rowcount or 0
