"""Polyfactory builders for CharterHub rows."""

from tests.factories.auth import RefreshTokenFactory, generate_token_hash
from tests.factories.base import BaseFactory, random_suffix, utc_now
from tests.factories.invitation import InvitationFactory
from tests.factories.user import DEFAULT_TEST_PASSWORD, UserFactory

__all__ = [
    "BaseFactory",
    "random_suffix",
    "utc_now",
    "UserFactory",
    "DEFAULT_TEST_PASSWORD",
    "InvitationFactory",
    "RefreshTokenFactory",
    "generate_token_hash",
]
