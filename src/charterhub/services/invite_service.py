"""Invitation issuing - staff invite customers to complete registration."""

from datetime import timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.charterhub.core.config import get_settings
from src.charterhub.core.exceptions import CharterHubError, StorageError, UserNotFoundError
from src.charterhub.core.logging import get_logger, token_prefix
from src.charterhub.core.notifications import build_invitation_url, send_invitation_email
from src.charterhub.core.security import generate_invitation_token
from src.charterhub.models import AuditAction, Invitation, User, UserRole
from src.charterhub.models.base import utc_now
from src.charterhub.repositories import InvitationRepository, UserRepository
from src.charterhub.schemas.invitation import InvitationCreateRequest
from src.charterhub.services.audit_service import AuditService

logger = get_logger(__name__)


class InviteService:
    """Service for creating customer invitations."""

    def __init__(
        self,
        invitation_repo: InvitationRepository,
        user_repo: UserRepository,
        audit_service: AuditService,
        session: AsyncSession,
    ):
        self.invitation_repo = invitation_repo
        self.user_repo = user_repo
        self.audit_service = audit_service
        self.session = session

    async def create_invitation(
        self, data: InvitationCreateRequest, created_by: User
    ) -> tuple[Invitation, str]:
        """Create an invitation and email it to the customer.

        Without an explicit ``customer_id`` the customer is looked up by email
        among clients, and a placeholder client row (no password, unverified)
        is created when none exists yet.

        Returns (invitation, invitation_url).
        """
        settings = get_settings()
        email = str(data.email).strip().lower()

        try:
            customer = await self._get_or_create_customer(data, email)

            invitation = Invitation(
                token=generate_invitation_token(),
                customer_id=customer.id,
                email=email,
                created_by=created_by.id,
                expires_at=utc_now() + timedelta(days=settings.invitation_expire_days),
            )
            self.invitation_repo.add(invitation)
            await self.invitation_repo.flush()

            await self.audit_service.record(
                AuditAction.INVITATION_CREATED,
                user_id=created_by.id,
                details={
                    "invitation_id": invitation.id,
                    "customer_id": customer.id,
                    "token": token_prefix(invitation.token),
                },
            )
            await self.session.commit()
        except CharterHubError:
            await self.session.rollback()
            raise
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Failed to create invitation", error=str(e))
            raise StorageError() from e

        await send_invitation_email(
            to=email,
            token=invitation.token,
            customer_name=customer.full_name,
            expire_days=settings.invitation_expire_days,
        )
        logger.info(
            "Invitation created",
            invitation_id=invitation.id,
            customer_id=customer.id,
            created_by=created_by.id,
        )
        return invitation, build_invitation_url(invitation.token)

    async def _get_or_create_customer(self, data: InvitationCreateRequest, email: str) -> User:
        if data.customer_id is not None:
            customer = await self.user_repo.get_by_id(data.customer_id)
            # Invitations only ever target client accounts
            if customer is None or customer.role != UserRole.CLIENT.value:
                raise UserNotFoundError("Customer not found")
            return customer

        customer = await self.user_repo.get_by_email(email, role=UserRole.CLIENT)
        if customer is not None:
            return customer

        customer = User(
            email=email,
            first_name=data.first_name,
            last_name=data.last_name,
            display_name=f"{data.first_name} {data.last_name}".strip(),
            role=UserRole.CLIENT.value,
            verified=False,
        )
        self.user_repo.add(customer)
        await self.user_repo.flush()
        logger.info("Placeholder customer created", customer_id=customer.id)
        return customer
