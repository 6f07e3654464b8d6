"""Resolve an invitation's customer_id to a customer identity.

Customers may live in the CharterHub users table or, for accounts created
before it existed, only in the WordPress ``wp_users`` table. Lookups are
tried in order and the first hit wins. When neither table knows the id the
identity is rebuilt from the invitation itself, since the invitation is
proof enough of who is registering.
"""

from collections.abc import Sequence
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.charterhub.core.logging import get_logger
from src.charterhub.models import IdentitySource, Invitation
from src.charterhub.repositories import LegacyUserRepository, UserRepository
from src.charterhub.schemas.invitation import CustomerIdentity

logger = get_logger(__name__)


class IdentityLookup(Protocol):
    source: IdentitySource

    async def lookup(self, customer_id: int) -> CustomerIdentity | None: ...


class PrimaryUserLookup:
    source = IdentitySource.PRIMARY

    def __init__(self, user_repo: UserRepository):
        self.user_repo = user_repo

    async def lookup(self, customer_id: int) -> CustomerIdentity | None:
        user = await self.user_repo.get_by_id(customer_id)
        if user is None or user.id is None:
            return None
        return CustomerIdentity(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
        )


class LegacyUserLookup:
    source = IdentitySource.FALLBACK

    def __init__(self, legacy_repo: LegacyUserRepository):
        self.legacy_repo = legacy_repo

    async def lookup(self, customer_id: int) -> CustomerIdentity | None:
        legacy = await self.legacy_repo.get_by_id(customer_id)
        if legacy is None or legacy.id is None:
            return None
        # wp_users only has a display name
        first_name, _, last_name = (legacy.display_name or "").strip().partition(" ")
        return CustomerIdentity(
            id=legacy.id,
            email=legacy.user_email,
            first_name=first_name,
            last_name=last_name.strip(),
        )


class IdentityResolver:
    """Try identity lookups in priority order."""

    def __init__(self, lookups: Sequence[IdentityLookup], session: AsyncSession):
        self.lookups = list(lookups)
        self.session = session

    async def resolve(self, invitation: Invitation) -> tuple[CustomerIdentity, IdentitySource]:
        customer_id = invitation.customer_id
        if customer_id:
            for strategy in self.lookups:
                identity = await self._try_lookup(strategy, customer_id)
                if identity is not None:
                    return identity, strategy.source

        logger.info(
            "Customer identity synthesized from invitation",
            customer_id=customer_id,
            invitation_id=invitation.id,
        )
        return (
            CustomerIdentity(id=customer_id or 0, email=invitation.email),
            IdentitySource.SYNTHESIZED,
        )

    async def _try_lookup(
        self, strategy: IdentityLookup, customer_id: int
    ) -> CustomerIdentity | None:
        # A broken table (e.g. wp_users missing) must not poison the
        # surrounding transaction, so every lookup gets its own savepoint.
        try:
            async with self.session.begin_nested():
                return await strategy.lookup(customer_id)
        except SQLAlchemyError as e:
            logger.warning(
                "Identity lookup failed",
                source=strategy.source.value,
                customer_id=customer_id,
                error=str(e),
            )
            return None


def default_identity_resolver(session: AsyncSession) -> IdentityResolver:
    """Primary CharterHub users first, then the legacy WordPress table."""
    return IdentityResolver(
        [
            PrimaryUserLookup(UserRepository(session)),
            LegacyUserLookup(LegacyUserRepository(session)),
        ],
        session,
    )
