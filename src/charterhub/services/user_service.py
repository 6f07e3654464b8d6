"""Profile service - reads and edits of a user's own profile."""

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.charterhub.core.exceptions import CharterHubError, EmailInUseError, StorageError
from src.charterhub.core.logging import get_logger
from src.charterhub.models import AuditAction, User
from src.charterhub.models.base import utc_now
from src.charterhub.repositories import UserRepository
from src.charterhub.schemas.auth import CredentialPair
from src.charterhub.schemas.user import UserUpdate
from src.charterhub.services.audit_service import AuditService
from src.charterhub.services.credential_service import CredentialService

logger = get_logger(__name__)


class UserService:
    """User profile service."""

    def __init__(
        self,
        user_repo: UserRepository,
        credentials: CredentialService,
        audit_service: AuditService,
        session: AsyncSession,
    ):
        self.user_repo = user_repo
        self.credentials = credentials
        self.audit_service = audit_service
        self.session = session

    async def get_by_id(self, user_id: int) -> User | None:
        return await self.user_repo.get_by_id(user_id)

    async def update(self, user: User, data: UserUpdate) -> tuple[User, CredentialPair | None]:
        """Update profile fields.

        An email change rotates the user's credentials in the same transaction
        as the field update: either both persist or neither does, so a user
        never ends up with a new email and tokens still claiming the old one.

        Returns:
            (updated user, new credentials if the email changed)
        """
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        new_email = update_data.pop("email", None)
        if new_email is not None:
            new_email = str(new_email).strip().lower()
        email_changed = new_email is not None and new_email != user.email.lower()

        user_id = user.id
        pair: CredentialPair | None = None
        revoked_hashes: list[str] = []
        try:
            if email_changed:
                if await self.user_repo.client_email_taken(new_email, exclude_user_id=user_id):
                    raise EmailInUseError()
                user.email = new_email

            for field, value in update_data.items():
                setattr(user, field, value)
            if "first_name" in update_data or "last_name" in update_data:
                user.display_name = user.full_name
            user.updated_at = utc_now()
            self.user_repo.add(user)
            await self.user_repo.flush()

            if email_changed:
                pair, revoked_hashes = await self.credentials.rotate_staged(user)

            await self.audit_service.record(
                AuditAction.USER_UPDATE,
                user_id=user.id,
                details={"fields": sorted(update_data) + (["email"] if email_changed else [])},
            )
            await self.session.commit()
        except CharterHubError:
            await self.session.rollback()
            raise
        except IntegrityError as e:
            await self.session.rollback()
            raise EmailInUseError() from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Profile update failed", user_id=user_id, error=str(e))
            raise StorageError() from e

        await self.credentials.publish_revocations(revoked_hashes)
        logger.info("Profile updated", user_id=user_id, email_changed=email_changed)
        return user, pair
