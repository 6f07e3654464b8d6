"""Repository for AuditLog entity."""

from sqlmodel import col, select

from src.charterhub.models.audit import AuditLog
from src.charterhub.repositories.base import BaseRepository


class AuditLogRepository(BaseRepository[AuditLog]):
    """Repository for AuditLog entity. Rows are only ever inserted."""

    model = AuditLog

    async def list_recent(
        self,
        action: str | None = None,
        user_id: int | None = None,
        limit: int = 50,
    ) -> list[AuditLog]:
        """List newest audit rows, optionally filtered by action and user."""
        query = select(AuditLog)
        if action:
            query = query.where(AuditLog.action == action)
        if user_id is not None:
            query = query.where(AuditLog.user_id == user_id)
        result = await self.session.execute(
            query.order_by(col(AuditLog.created_at).desc()).limit(limit)
        )
        return list(result.scalars().all())
