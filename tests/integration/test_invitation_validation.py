"""Invitation validation against a real database and through the API."""

from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.charterhub.core.exceptions import InvalidTokenError
from src.charterhub.models import IdentitySource, Invitation, LegacyUser, User
from src.charterhub.models.base import utc_now
from src.charterhub.repositories import InvitationRepository
from src.charterhub.services import InvitationValidator, default_identity_resolver
from tests.factories import InvitationFactory
from tests.helpers import get_invitation, seed

pytestmark = pytest.mark.integration

VALIDATE_URL = "/api/v1/invitations/validate"


async def _validate(session_factory: async_sessionmaker[AsyncSession], token: str):
    async with session_factory() as session:
        validator = InvitationValidator(
            InvitationRepository(session), default_identity_resolver(session), session
        )
        return await validator.validate(token)


class TestIdentitySources:
    async def test_primary_user(self, session_factory, open_invitation, placeholder_customer):
        resolved = await _validate(session_factory, open_invitation.token)

        assert resolved.source == IdentitySource.PRIMARY
        assert resolved.customer.id == placeholder_customer.id
        assert resolved.customer.email == placeholder_customer.email
        assert resolved.customer.first_name == "Ada"
        assert resolved.invitation.token == open_invitation.token

    async def test_legacy_wordpress_user(self, session_factory):
        await seed(
            session_factory,
            LegacyUser(id=500, user_email="legacy@example.com", display_name="Grace Hopper"),
        )
        (invitation,) = await seed(
            session_factory, InvitationFactory.build(customer_id=500, email="legacy@example.com")
        )

        resolved = await _validate(session_factory, invitation.token)

        assert resolved.source == IdentitySource.FALLBACK
        assert resolved.customer.id == 500
        assert resolved.customer.first_name == "Grace"
        assert resolved.customer.last_name == "Hopper"

    async def test_unknown_customer_is_synthesized(self, session_factory):
        (invitation,) = await seed(
            session_factory, InvitationFactory.build(customer_id=999, email="new@example.com")
        )

        resolved = await _validate(session_factory, invitation.token)

        assert resolved.source == IdentitySource.SYNTHESIZED
        assert resolved.customer.id == 999
        assert resolved.customer.email == "new@example.com"

    async def test_validation_is_read_only(self, session_factory, open_invitation):
        await _validate(session_factory, open_invitation.token)

        invitation = await get_invitation(session_factory, open_invitation.token)
        assert invitation is not None
        assert invitation.consumed is False

    async def test_token_match_is_case_sensitive(self, session_factory):
        (invitation,) = await seed(
            session_factory, InvitationFactory.build(token="AbCdEf123", customer_id=1)
        )

        with pytest.raises(InvalidTokenError):
            await _validate(session_factory, invitation.token.lower())


class TestValidateEndpoint:
    async def test_valid_invitation(
        self, client: AsyncClient, open_invitation: Invitation, placeholder_customer: User
    ):
        response = await client.get(VALIDATE_URL, params={"token": open_invitation.token})

        assert response.status_code == 200
        body = response.json()
        assert body["valid"] is True
        assert body["source"] == "primary"
        assert body["customer"]["id"] == placeholder_customer.id
        assert body["invitation"]["customer_id"] == placeholder_customer.id

    async def test_unknown_token(self, client: AsyncClient):
        response = await client.get(VALIDATE_URL, params={"token": "does-not-exist"})

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "invalid_token"
        assert body["request_id"] == response.headers["X-Request-ID"]

    async def test_missing_token(self, client: AsyncClient):
        response = await client.get(VALIDATE_URL)

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    async def test_expired_invitation(self, client: AsyncClient, session_factory):
        await seed(
            session_factory,
            InvitationFactory.build(
                token="abc123", customer_id=42, expires_at=utc_now() - timedelta(days=1)
            ),
        )

        response = await client.get(VALIDATE_URL, params={"token": "abc123"})

        assert response.status_code == 410
        assert response.json()["error"] == "token_expired"

    async def test_used_invitation_reports_customer(self, client: AsyncClient, session_factory):
        await seed(
            session_factory,
            InvitationFactory.consumed(token="xyz789", customer_id=7, email="a@b.com"),
        )

        response = await client.get(VALIDATE_URL, params={"token": "xyz789"})

        assert response.status_code == 409
        body = response.json()
        assert body["error"] == "token_used"
        assert body["customer_id"] == 7
        assert body["customer_email"] == "a@b.com"

    async def test_used_and_expired_reports_used(self, client: AsyncClient, session_factory):
        await seed(
            session_factory,
            InvitationFactory.consumed(
                token="both", customer_id=7, expires_at=utc_now() - timedelta(days=1)
            ),
        )

        response = await client.get(VALIDATE_URL, params={"token": "both"})

        assert response.status_code == 409

    async def test_single_legacy_flag_counts_as_used(self, client: AsyncClient, session_factory):
        await seed(
            session_factory, InvitationFactory.build(token="legacy-flag", customer_id=7, used=True)
        )

        response = await client.get(VALIDATE_URL, params={"token": "legacy-flag"})

        assert response.status_code == 409

    async def test_missing_customer_reference(self, client: AsyncClient, session_factory):
        await seed(session_factory, InvitationFactory.build(token="orphan", customer_id=0))

        response = await client.get(VALIDATE_URL, params={"token": "orphan"})

        assert response.status_code == 422
        assert response.json()["error"] == "invalid_invitation"
