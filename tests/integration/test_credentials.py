"""Credential issuing and rotation."""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.charterhub.core.cache import PREFIX_REFRESH_BLACKLIST
from src.charterhub.core.exceptions import UserNotFoundError
from src.charterhub.core.security import decode_token, hash_token
from src.charterhub.models import AuditAction, User
from src.charterhub.repositories import AuditLogRepository, RefreshTokenRepository, UserRepository
from src.charterhub.services import AuditService, CredentialService
from tests.helpers import audit_rows, bearer, get_row, refresh_rows

pytestmark = pytest.mark.integration


def _service(session: AsyncSession) -> CredentialService:
    return CredentialService(
        UserRepository(session),
        RefreshTokenRepository(session),
        AuditService(AuditLogRepository(session), session),
        session,
    )


async def _issue(session_factory: async_sessionmaker[AsyncSession], user: User):
    async with session_factory() as session:
        return await _service(session).issue(user.id, user.email, user.role, user.token_version)


async def _rotate(session_factory: async_sessionmaker[AsyncSession], user_id: int):
    async with session_factory() as session:
        return await _service(session).rotate(user_id)


class TestIssue:
    async def test_issue_stores_only_the_hash(self, session_factory, test_user: User):
        pair = await _issue(session_factory, test_user)

        rows = await refresh_rows(session_factory, test_user.id)
        assert len(rows) == 1
        assert rows[0].token_hash == hash_token(pair.refresh_token)
        assert rows[0].token_hash != pair.refresh_token
        assert rows[0].expires_at == pair.expires_at

        payload = decode_token(pair.access_token)
        assert payload is not None
        assert payload["sub"] == str(test_user.id)
        assert payload["tvr"] == test_user.token_version

        stored = await get_row(session_factory, User, test_user.id)
        assert stored is not None
        assert stored.last_login == pair.issued_at
        assert len(await audit_rows(session_factory, AuditAction.TOKEN_ISSUED.value)) == 1

    async def test_each_issue_is_a_new_session(self, session_factory, test_user: User):
        first = await _issue(session_factory, test_user)
        second = await _issue(session_factory, test_user)

        assert first.refresh_token != second.refresh_token
        assert first.access_token != second.access_token
        assert len(await refresh_rows(session_factory, test_user.id)) == 2

    async def test_unknown_user(self, session_factory):
        async with session_factory() as session:
            with pytest.raises(UserNotFoundError):
                await _service(session).issue(424242, "ghost@example.com", "client", 1)


class TestRotate:
    async def test_old_hash_is_no_longer_valid(self, session_factory, test_user: User):
        old = await _issue(session_factory, test_user)

        new = await _rotate(session_factory, test_user.id)

        assert hash_token(new.refresh_token) != hash_token(old.refresh_token)
        async with session_factory() as session:
            repo = RefreshTokenRepository(session)
            assert await repo.get_valid_by_hash(hash_token(old.refresh_token)) is None
            assert await repo.get_valid_by_hash(hash_token(new.refresh_token)) is not None

    async def test_token_version_is_bumped(self, session_factory, test_user: User):
        new = await _rotate(session_factory, test_user.id)

        stored = await get_row(session_factory, User, test_user.id)
        assert stored is not None
        assert stored.token_version == test_user.token_version + 1
        payload = decode_token(new.access_token)
        assert payload is not None
        assert payload["tvr"] == stored.token_version

    async def test_old_access_token_is_rejected(
        self, client: AsyncClient, session_factory, test_user: User, user_tokens
    ):
        await _rotate(session_factory, test_user.id)

        headers = bearer(user_tokens["access_token"])
        response = await client.get("/api/v1/users/me", headers=headers)
        assert response.status_code == 401

        refresh = await client.post(
            "/api/v1/auth/refresh", json={"refresh_token": user_tokens["refresh_token"]}
        )
        assert refresh.status_code == 401

    async def test_revoked_hashes_are_blacklisted(
        self, session_factory, mock_redis, test_user: User
    ):
        old = await _issue(session_factory, test_user)

        await _rotate(session_factory, test_user.id)

        key = f"{PREFIX_REFRESH_BLACKLIST}:{hash_token(old.refresh_token)}"
        assert await mock_redis.get(key) == "1"

    async def test_unknown_user(self, session_factory):
        with pytest.raises(UserNotFoundError):
            await _rotate(session_factory, 424242)
