"""Audit logging service - records auth and invitation events."""

from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.charterhub.core.audit_context import get_audit_context
from src.charterhub.core.logging import get_logger
from src.charterhub.models import AuditAction, AuditLog, AuditStatus
from src.charterhub.repositories import AuditLogRepository

logger = get_logger(__name__)


class AuditService:
    """Service for recording audit logs.

    Rows are written inside a SAVEPOINT of the caller's transaction, so they
    commit together with the change they describe and never on their own.
    A failing insert only rolls back the savepoint: auditing is best effort
    and never blocks the operation being audited.
    """

    def __init__(self, audit_repo: AuditLogRepository, session: AsyncSession):
        self.audit_repo = audit_repo
        self.session = session

    async def record(
        self,
        action: AuditAction | str,
        user_id: int | None = None,
        details: dict[str, Any] | None = None,
        status: AuditStatus = AuditStatus.SUCCESS,
    ) -> AuditLog | None:
        """Stage an audit log entry in the current transaction.

        Request metadata (IP, request_id) is taken from the audit context.
        The caller commits.

        Returns:
            The staged AuditLog, or None if the insert failed
        """
        action_value = action.value if isinstance(action, AuditAction) else action
        ctx = get_audit_context()
        audit_log = AuditLog(
            user_id=user_id,
            action=action_value,
            status=status.value,
            details=details,
            ip_address=ctx.ip_address,
            request_id=ctx.request_id,
        )

        try:
            async with self.session.begin_nested():
                self.audit_repo.add(audit_log)
        except SQLAlchemyError as e:
            logger.warning("Failed to record audit log", action=action_value, error=str(e))
            return None

        logger.debug("Audit log recorded", action=action_value, user_id=user_id)
        return audit_log

    async def list_recent(
        self,
        action: AuditAction | None = None,
        user_id: int | None = None,
        limit: int = 50,
    ) -> list[AuditLog]:
        return await self.audit_repo.list_recent(
            action=action.value if action else None,
            user_id=user_id,
            limit=limit,
        )
