"""Repositories for User and LegacyUser entities."""

from sqlalchemy import func, update
from sqlmodel import col, select

from src.charterhub.models.base import utc_now
from src.charterhub.models.enums import UserRole
from src.charterhub.models.user import LegacyUser, User
from src.charterhub.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User entity."""

    model = User

    async def get_by_id_for_update(self, user_id: int) -> User | None:
        """Get a user and lock the row until the transaction ends."""
        return await self.get_by_id(user_id, for_update=True)

    async def get_by_email(self, email: str, role: UserRole | None = None) -> User | None:
        """Case-insensitive lookup, optionally within one role."""
        query = select(User).where(func.lower(User.email) == email.strip().lower())
        if role is not None:
            query = query.where(User.role == role.value)
        result = await self.session.execute(query.order_by(col(User.id)))
        return result.scalars().first()

    async def list_by_email(self, email: str) -> list[User]:
        """Every account with ``email``, across roles, oldest first."""
        query = select(User).where(func.lower(User.email) == email.strip().lower())
        result = await self.session.execute(query.order_by(col(User.id)))
        return list(result.scalars().all())

    async def client_email_taken(self, email: str, exclude_user_id: int | None = None) -> bool:
        """Check whether another client already uses ``email``."""
        query = select(User.id).where(
            func.lower(User.email) == email.strip().lower(),
            User.role == UserRole.CLIENT.value,
        )
        if exclude_user_id is not None:
            query = query.where(User.id != exclude_user_id)
        result = await self.session.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def bump_token_version(self, user_id: int) -> int:
        """Increment token_version in SQL and return the new value."""
        await self.session.execute(
            update(User)
            .where(col(User.id) == user_id)
            .values(token_version=User.token_version + 1, updated_at=utc_now())
        )
        result = await self.session.execute(select(User.token_version).where(User.id == user_id))
        return result.scalar_one()


class LegacyUserRepository(BaseRepository[LegacyUser]):
    """Read-only access to the WordPress ``wp_users`` table."""

    model = LegacyUser
