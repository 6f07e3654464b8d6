"""Authentication service - login, refresh-token exchange, logout."""

import hmac

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.charterhub.core.cache import is_token_blacklisted
from src.charterhub.core.exceptions import StorageError
from src.charterhub.core.logging import get_logger
from src.charterhub.core.security import hash_token, verify_password
from src.charterhub.models import AuditAction, AuditStatus, User
from src.charterhub.models.base import utc_now
from src.charterhub.repositories import RefreshTokenRepository, UserRepository
from src.charterhub.schemas.auth import CredentialPair
from src.charterhub.services.audit_service import AuditService
from src.charterhub.services.credential_service import CredentialService

logger = get_logger(__name__)


class AuthService:
    """Authentication service - handles login, token refresh and logout."""

    def __init__(
        self,
        user_repo: UserRepository,
        token_repo: RefreshTokenRepository,
        credentials: CredentialService,
        audit_service: AuditService,
        session: AsyncSession,
    ):
        self.user_repo = user_repo
        self.token_repo = token_repo
        self.credentials = credentials
        self.audit_service = audit_service
        self.session = session

    async def _match_account(self, email: str, password: str) -> tuple[User | None, User | None]:
        """Find the account with ``email`` whose password verifies.

        A client and a staff account may share an email, so every account
        with that address is tried. Returns (matched account, first account
        with the email) so failures can still be audited.
        """
        accounts = await self.user_repo.list_by_email(email)
        if not accounts:
            # Unknown email costs one hash verification like a wrong password
            verify_password(password, None)
            return None, None

        for account in accounts:
            if verify_password(password, account.hashed_password):
                return account, accounts[0]
        return None, accounts[0]

    async def authenticate(self, email: str, password: str) -> tuple[User, CredentialPair] | None:
        """Authenticate user and issue credentials.

        Returns None if authentication fails. Placeholder accounts created by
        an invitation have no password and cannot log in until registration
        is completed.

        Raises:
            StorageError: the login could not be recorded
        """
        try:
            user, known = await self._match_account(email, password)

            if user is None or not user.verified:
                failed = user or known
                if failed is not None:
                    await self.audit_service.record(
                        AuditAction.USER_LOGIN, user_id=failed.id, status=AuditStatus.FAILURE
                    )
                    await self.session.commit()
                logger.info("Login failed", user_id=failed.id if failed else None)
                return None

            user.last_login = utc_now()
            self.user_repo.add(user)
            pair = await self.credentials.stage(user)
            await self.audit_service.record(AuditAction.USER_LOGIN, user_id=user.id)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Login failed on storage", error=str(e))
            raise StorageError() from e

        logger.info("User logged in", user_id=user.id, role=user.role)
        return user, pair

    async def refresh(self, refresh_token: str) -> CredentialPair | None:
        """Exchange a refresh token for a new credential pair.

        Implements rotation: the presented token is revoked and a new one is
        issued in the same transaction. A token minted before the user's
        token_version was bumped is rejected.

        Returns:
            New credential pair, or None if the token is not valid

        Raises:
            StorageError: the rotation could not be persisted
        """
        token_hash = hash_token(refresh_token)

        # Fast path: Redis blacklist; None means Redis unavailable
        if await is_token_blacklisted(token_hash) is True:
            return None

        try:
            # FOR UPDATE so parallel refreshes of one token cannot both succeed
            db_token = await self.token_repo.get_valid_by_hash(token_hash, for_update=True)
            if db_token is None or not hmac.compare_digest(token_hash, db_token.token_hash):
                await self.session.rollback()
                return None

            user = await self.user_repo.get_by_id(db_token.user_id)
            if user is None or user.token_version != db_token.token_version:
                await self.token_repo.revoke(db_token)
                await self.session.commit()
                logger.info("Stale refresh token revoked", user_id=db_token.user_id)
                return None

            await self.token_repo.revoke(db_token)
            pair = await self.credentials.stage(user)
            await self.audit_service.record(AuditAction.TOKEN_REFRESH, user_id=user.id)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Refresh failed on storage", error=str(e))
            raise StorageError() from e

        await self.credentials.publish_revocations([token_hash])
        return pair

    async def logout(self, refresh_token: str) -> bool:
        """Revoke a refresh token. Returns True if a token was revoked."""
        token_hash = hash_token(refresh_token)
        try:
            db_token = await self.token_repo.get_by_hash(token_hash)
            if db_token is None or db_token.revoked:
                return False

            await self.token_repo.revoke(db_token)
            await self.audit_service.record(AuditAction.USER_LOGOUT, user_id=db_token.user_id)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Logout failed on storage", error=str(e))
            raise StorageError() from e

        await self.credentials.publish_revocations([token_hash])
        return True
