"""Invitation validation - read-only checks of a presented invitation token."""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.charterhub.core.exceptions import (
    InvalidInputError,
    InvalidInvitationError,
    InvalidTokenError,
    StorageError,
    TokenAlreadyUsedError,
    TokenExpiredError,
)
from src.charterhub.core.logging import get_logger, token_prefix
from src.charterhub.models import Invitation
from src.charterhub.models.base import utc_now
from src.charterhub.repositories import InvitationRepository
from src.charterhub.schemas.invitation import InvitationRead, ResolvedInvitation
from src.charterhub.services.identity_resolver import IdentityResolver

logger = get_logger(__name__)


class InvitationValidator:
    """Check an invitation token and resolve the customer it was issued for.

    Checks run in a fixed order: existence, consumption, expiry, then
    customer reference. A consumed invitation reports ``token_used`` even
    when it has also expired.
    """

    def __init__(
        self,
        invitation_repo: InvitationRepository,
        resolver: IdentityResolver,
        session: AsyncSession,
    ):
        self.invitation_repo = invitation_repo
        self.resolver = resolver
        self.session = session

    async def validate(self, token: str) -> ResolvedInvitation:
        """Validate ``token`` and resolve its customer identity.

        Raises:
            InvalidInputError: token is empty
            InvalidTokenError: no invitation has this exact token
            TokenAlreadyUsedError: invitation was already consumed
            TokenExpiredError: invitation expired and was never consumed
            InvalidInvitationError: invitation has no customer reference
            StorageError: the invitation lookup failed
        """
        if not token or not token.strip():
            raise InvalidInputError("Invitation token is required")

        invitation = await self._load(token)
        self.check(invitation, token)

        identity, source = await self.resolver.resolve(invitation)
        logger.info(
            "Invitation validated",
            token=token_prefix(token),
            customer_id=identity.id,
            source=source.value,
        )
        return ResolvedInvitation(
            invitation=InvitationRead.model_validate(invitation),
            customer=identity,
            source=source,
        )

    @staticmethod
    def check(invitation: Invitation | None, token: str) -> Invitation:
        """Apply the state checks to an already loaded invitation."""
        if invitation is None:
            logger.info("Invitation not found", token=token_prefix(token))
            raise InvalidTokenError()

        if invitation.consumed:
            logger.info(
                "Invitation already used",
                token=token_prefix(token),
                customer_id=invitation.customer_id,
            )
            raise TokenAlreadyUsedError(
                customer_id=invitation.customer_id,
                customer_email=invitation.email,
            )

        if invitation.is_expired(utc_now()):
            logger.info(
                "Invitation expired",
                token=token_prefix(token),
                expires_at=invitation.expires_at.isoformat() if invitation.expires_at else None,
            )
            raise TokenExpiredError()

        if not invitation.customer_id:
            logger.warning(
                "Invitation has no customer reference",
                token=token_prefix(token),
                invitation_id=invitation.id,
            )
            raise InvalidInvitationError()

        return invitation

    async def _load(self, token: str) -> Invitation | None:
        try:
            return await self.invitation_repo.get_by_token(token)
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Invitation lookup failed", token=token_prefix(token), error=str(e))
            raise StorageError() from e
