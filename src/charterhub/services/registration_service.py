"""Invited registration - turns an open invitation into an active client account."""

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.charterhub.core.exceptions import (
    CharterHubError,
    EmailInUseError,
    InvalidInvitationError,
    StorageError,
    TokenAlreadyUsedError,
)
from src.charterhub.core.logging import get_logger, token_prefix
from src.charterhub.core.security import hash_password
from src.charterhub.models import AuditAction, IdentitySource, User, UserRole
from src.charterhub.models.base import utc_now
from src.charterhub.repositories import UserRepository
from src.charterhub.schemas.auth import CredentialPair, RegisterRequest
from src.charterhub.schemas.invitation import ResolvedInvitation
from src.charterhub.services.audit_service import AuditService
from src.charterhub.services.credential_service import CredentialService
from src.charterhub.services.invitation_consumer import InvitationConsumer
from src.charterhub.services.invitation_validator import InvitationValidator

logger = get_logger(__name__)


class RegistrationService:
    """Complete a registration that was started by a staff invitation.

    Validation, user activation, invitation consumption and credential
    issuing share one transaction. If any step fails the invitation stays
    open and the user row is left as it was.
    """

    def __init__(
        self,
        validator: InvitationValidator,
        consumer: InvitationConsumer,
        credentials: CredentialService,
        user_repo: UserRepository,
        audit_service: AuditService,
        session: AsyncSession,
    ):
        self.validator = validator
        self.consumer = consumer
        self.credentials = credentials
        self.user_repo = user_repo
        self.audit_service = audit_service
        self.session = session

    async def complete_invited_registration(
        self, data: RegisterRequest
    ) -> tuple[User, CredentialPair]:
        """Register the invited customer and log them in.

        Raises:
            InvalidInputError, InvalidTokenError, TokenAlreadyUsedError,
            TokenExpiredError, InvalidInvitationError: from validation
            EmailInUseError: another client account owns the email
            StorageError: the transaction failed and was rolled back
        """
        try:
            resolved = await self.validator.validate(data.token)
            user = await self._activate_user(resolved, data)
            receipt = await self.consumer.consume_staged(data.token, used_by_user_id=user.id)
            if receipt.already_consumed:
                # Lost a race with a concurrent registration for the same token
                raise TokenAlreadyUsedError(
                    customer_id=resolved.customer.id,
                    customer_email=resolved.customer.email,
                )

            pair = await self.credentials.stage(user)
            await self.audit_service.record(
                AuditAction.USER_REGISTER,
                user_id=user.id,
                details={
                    "invitation_id": resolved.invitation.id,
                    "source": resolved.source.value,
                },
            )
            await self.session.commit()
        except CharterHubError:
            await self.session.rollback()
            raise
        except IntegrityError as e:
            await self.session.rollback()
            logger.info("Registration email conflict", token=token_prefix(data.token))
            raise EmailInUseError() from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Registration failed", token=token_prefix(data.token), error=str(e))
            raise StorageError() from e

        logger.info(
            "Invited registration completed",
            user_id=user.id,
            source=resolved.source.value,
        )
        return user, pair

    async def _activate_user(self, resolved: ResolvedInvitation, data: RegisterRequest) -> User:
        """Update the pre-provisioned user row, or create one for legacy and
        synthesized identities."""
        email = resolved.customer.email.strip().lower()
        user: User | None = None
        if resolved.source == IdentitySource.PRIMARY:
            user = await self.user_repo.get_by_id_for_update(resolved.customer.id)
            if user is not None and user.role != UserRole.CLIENT.value:
                logger.warning("Invitation points at a staff account", user_id=user.id)
                raise InvalidInvitationError()

        exclude_id = user.id if user else None
        if await self.user_repo.client_email_taken(email, exclude_user_id=exclude_id):
            raise EmailInUseError()

        if user is None:
            user = User(email=email)

        user.email = email
        user.hashed_password = hash_password(data.password)
        user.first_name = data.first_name
        user.last_name = data.last_name
        user.display_name = f"{data.first_name} {data.last_name}".strip()
        user.phone_number = data.phone_number
        user.company = data.company
        user.role = UserRole.CLIENT.value
        user.verified = True
        user.updated_at = utc_now()

        self.user_repo.add(user)
        await self.user_repo.flush()
        return user
