"""Invitation consumption - the one-way open -> consumed transition."""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.charterhub.core.exceptions import (
    CharterHubError,
    InvalidInputError,
    InvalidTokenError,
    StorageError,
)
from src.charterhub.core.logging import get_logger, token_prefix
from src.charterhub.models import AuditAction
from src.charterhub.models.base import utc_now
from src.charterhub.repositories import InvitationRepository
from src.charterhub.schemas.invitation import ConsumptionReceipt
from src.charterhub.services.audit_service import AuditService

logger = get_logger(__name__)


class InvitationConsumer:
    """Mark invitations as used, idempotently.

    Consuming an already consumed token succeeds with
    ``already_consumed=True`` so clients can safely retry after a timeout.
    """

    def __init__(
        self,
        invitation_repo: InvitationRepository,
        audit_service: AuditService,
        session: AsyncSession,
    ):
        self.invitation_repo = invitation_repo
        self.audit_service = audit_service
        self.session = session

    async def consume(self, token: str, used_by_user_id: int | None = None) -> ConsumptionReceipt:
        """Consume ``token`` in its own transaction.

        Raises:
            InvalidInputError: token is empty
            InvalidTokenError: no invitation has this token
            StorageError: the update or commit failed; nothing was persisted
        """
        if not token or not token.strip():
            raise InvalidInputError("Invitation token is required")

        try:
            receipt = await self.consume_staged(token, used_by_user_id)
            await self.session.commit()
        except CharterHubError:
            await self.session.rollback()
            raise
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Invitation consumption failed", token=token_prefix(token), error=str(e))
            raise StorageError() from e

        return receipt

    async def consume_staged(
        self, token: str, used_by_user_id: int | None = None
    ) -> ConsumptionReceipt:
        """Consume ``token`` inside the caller's transaction without committing.

        The state change is a single conditional UPDATE. Its row count, not a
        prior read, decides whether this call performed the transition.
        """
        consumed_at = utc_now()
        affected = await self.invitation_repo.mark_consumed(token, consumed_at, used_by_user_id)

        if affected == 0:
            invitation = await self.invitation_repo.get_by_token(token)
            if invitation is None:
                logger.info("Consume of unknown invitation", token=token_prefix(token))
                raise InvalidTokenError()
            logger.info("Invitation already consumed", token=token_prefix(token))
            return ConsumptionReceipt(
                already_consumed=True,
                affected_rows=0,
                consumed_at=invitation.used_at,
            )

        await self.audit_service.record(
            AuditAction.INVITATION_USED,
            user_id=used_by_user_id,
            details={"token": token_prefix(token), "rows_affected": affected},
        )
        logger.info(
            "Invitation consumed",
            token=token_prefix(token),
            used_by_user_id=used_by_user_id,
        )
        return ConsumptionReceipt(
            already_consumed=False,
            affected_rows=affected,
            consumed_at=consumed_at,
        )
