"""Credential issuing - JWT access tokens paired with hashed refresh tokens."""

from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.charterhub.core.cache import blacklist_tokens
from src.charterhub.core.config import get_settings
from src.charterhub.core.exceptions import CharterHubError, StorageError, UserNotFoundError
from src.charterhub.core.logging import get_logger
from src.charterhub.core.security import create_access_token, create_refresh_token, hash_token
from src.charterhub.models import AuditAction, RefreshToken, User
from src.charterhub.models.base import utc_now
from src.charterhub.repositories import RefreshTokenRepository, UserRepository
from src.charterhub.schemas.auth import CredentialPair
from src.charterhub.services.audit_service import AuditService

logger = get_logger(__name__)


class CredentialService:
    """Mint and rotate session credentials.

    ``stage``/``rotate_staged`` work inside a transaction owned by the
    caller (registration, login, profile update). ``issue``/``rotate`` own
    their transaction and commit.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        token_repo: RefreshTokenRepository,
        audit_service: AuditService,
        session: AsyncSession,
    ):
        self.user_repo = user_repo
        self.token_repo = token_repo
        self.audit_service = audit_service
        self.session = session

    async def stage_for(
        self, user_id: int, email: str, role: str, token_version: int
    ) -> CredentialPair:
        """Mint a credential pair and stage the refresh-token hash (no commit)."""
        issued_at = utc_now()
        access_token, access_expires_at = create_access_token(
            subject=user_id,
            email=email,
            role=role,
            token_version=token_version,
        )
        refresh_token, refresh_expires_at = create_refresh_token()

        self.token_repo.add(
            RefreshToken(
                user_id=user_id,
                token_hash=hash_token(refresh_token),
                token_version=token_version,
                issued_at=issued_at,
                expires_at=refresh_expires_at,
            )
        )
        await self.token_repo.flush()

        return CredentialPair(
            access_token=access_token,
            refresh_token=refresh_token,
            issued_at=issued_at,
            access_expires_at=access_expires_at,
            expires_at=refresh_expires_at,
        )

    async def stage(self, user: User) -> CredentialPair:
        if user.id is None:
            raise ValueError("User must be flushed before credentials are issued")
        return await self.stage_for(user.id, user.email, user.role, user.token_version)

    async def issue(
        self, user_id: int, email: str, role: str, token_version: int
    ) -> CredentialPair:
        """Issue credentials for an authenticated identity and record last_login.

        Raises:
            UserNotFoundError: no user with ``user_id``
            StorageError: persisting the refresh-token hash failed
        """
        try:
            user = await self.user_repo.get_by_id(user_id)
            if user is None:
                raise UserNotFoundError()

            pair = await self.stage_for(user_id, email, role, token_version)
            user.last_login = pair.issued_at
            self.user_repo.add(user)
            await self.audit_service.record(AuditAction.TOKEN_ISSUED, user_id=user_id)
            await self.session.commit()
        except CharterHubError:
            await self.session.rollback()
            raise
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Failed to issue credentials", user_id=user_id, error=str(e))
            raise StorageError() from e

        logger.info("Credentials issued", user_id=user_id)
        return pair

    async def revoke_all_staged(self, user_id: int) -> list[str]:
        """Revoke every active refresh token of a user (no commit).

        Returns:
            Hashes of the revoked tokens, for the Redis blacklist after commit.
        """
        active = await self.token_repo.get_active_for_user(user_id)
        hashes = [token.token_hash for token in active]
        await self.token_repo.revoke_all_for_user(user_id)
        return hashes

    async def rotate_staged(self, user: User) -> tuple[CredentialPair, list[str]]:
        """Invalidate all existing credentials of ``user`` and mint a new pair.

        Bumping token_version invalidates outstanding access tokens; revoking
        the refresh rows invalidates outstanding refresh tokens. Rows are kept
        for audit. The caller commits.

        Returns:
            (new credential pair, hashes of revoked refresh tokens)
        """
        if user.id is None:
            raise ValueError("User must be flushed before credentials are rotated")

        revoked_hashes = await self.revoke_all_staged(user.id)
        user.token_version = await self.user_repo.bump_token_version(user.id)
        pair = await self.stage(user)
        await self.audit_service.record(
            AuditAction.TOKEN_ROTATED,
            user_id=user.id,
            details={"revoked_tokens": len(revoked_hashes), "token_version": user.token_version},
        )
        return pair, revoked_hashes

    async def rotate(self, user_id: int) -> CredentialPair:
        """Rotate credentials for ``user_id`` in a single transaction.

        Raises:
            UserNotFoundError: no user with ``user_id``
            StorageError: the rotation could not be persisted; nothing changed
        """
        try:
            user = await self.user_repo.get_by_id_for_update(user_id)
            if user is None:
                raise UserNotFoundError()
            pair, revoked_hashes = await self.rotate_staged(user)
            await self.session.commit()
        except CharterHubError:
            await self.session.rollback()
            raise
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Credential rotation failed", user_id=user_id, error=str(e))
            raise StorageError() from e

        await self.publish_revocations(revoked_hashes)
        logger.info("Credentials rotated", user_id=user_id, revoked_tokens=len(revoked_hashes))
        return pair

    async def publish_revocations(self, token_hashes: list[str]) -> None:
        """Push revoked hashes to the Redis blacklist. Call only after commit.

        Redis is a cache for fast rejection; the database stays authoritative,
        so failures are logged and ignored.
        """
        if not token_hashes:
            return
        try:
            ttl = get_settings().refresh_token_expire_days * 86400
            await blacklist_tokens(token_hashes, ttl)
        except (RedisError, OSError) as e:
            logger.warning(
                "Failed to blacklist tokens in Redis",
                error=str(e),
                token_count=len(token_hashes),
            )
