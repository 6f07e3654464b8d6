"""Tests for security-critical functionality."""

from datetime import timedelta

import pytest
from jose import jwt
from pydantic import ValidationError

from src.charterhub.core.config import get_settings
from src.charterhub.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    generate_invitation_token,
    hash_password,
    hash_token,
    verify_password,
)
from src.charterhub.schemas.auth import RegisterRequest

pytestmark = pytest.mark.unit


class TestPasswordHashing:
    def test_roundtrip(self):
        hashed = hash_password("vQ7#mLp2!charter-Zx9")
        assert hashed.startswith("$argon2id$")
        assert verify_password("vQ7#mLp2!charter-Zx9", hashed) is True

    def test_wrong_password(self):
        hashed = hash_password("vQ7#mLp2!charter-Zx9")
        assert verify_password("something-else", hashed) is False

    def test_garbage_hash_is_rejected(self):
        assert verify_password("whatever", "not-a-hash") is False

    @pytest.mark.parametrize("hashed", [None, ""])
    def test_missing_hash_never_matches(self, hashed):
        assert verify_password("vQ7#mLp2!charter-Zx9", hashed) is False


class TestTokenHashing:
    def test_deterministic(self):
        assert hash_token("abc") == hash_token("abc")
        assert len(hash_token("abc")) == 64

    def test_refresh_tokens_are_unique(self):
        first, _ = create_refresh_token()
        second, _ = create_refresh_token()
        assert first != second
        assert hash_token(first) != hash_token(second)

    def test_invitation_token_format(self):
        token = generate_invitation_token()
        assert len(token) == 64
        int(token, 16)


class TestAccessToken:
    def test_claims(self):
        token, expires_at = create_access_token(
            subject=12, email="a@b.com", role="client", token_version=3
        )
        payload = decode_token(token)

        assert payload is not None
        assert payload["sub"] == "12"
        assert payload["email"] == "a@b.com"
        assert payload["role"] == "client"
        assert payload["tvr"] == 3
        assert payload["type"] == "access"
        assert payload["jti"]
        assert expires_at.tzinfo is None

    def test_every_token_is_distinct(self):
        first, _ = create_access_token(12, "a@b.com", "client", 1)
        second, _ = create_access_token(12, "a@b.com", "client", 1)
        assert first != second

    def test_expired_token(self):
        token, _ = create_access_token(
            12, "a@b.com", "client", 1, expires_delta=timedelta(seconds=-10)
        )
        assert decode_token(token) is None

    def test_wrong_audience(self):
        settings = get_settings()
        token = jwt.encode(
            {"sub": "1", "aud": "someone-else", "iss": settings.jwt_issuer},
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )
        assert decode_token(token) is None

    def test_wrong_secret(self):
        settings = get_settings()
        token = jwt.encode(
            {"sub": "1", "aud": settings.jwt_audience, "iss": settings.jwt_issuer},
            "x" * 40,
            algorithm=settings.jwt_algorithm,
        )
        assert decode_token(token) is None

    def test_malformed(self):
        assert decode_token("not.a.jwt") is None


class TestPasswordStrength:
    def _request(self, password: str) -> RegisterRequest:
        return RegisterRequest(
            token="abc",
            password=password,
            first_name="Ada",
            last_name="Lovelace",
        )

    def test_strong_password(self):
        assert self._request("vQ7#mLp2!charter-Zx9").password == "vQ7#mLp2!charter-Zx9"

    @pytest.mark.parametrize("password", ["password", "password123", "qwertyuiop"])
    def test_weak_passwords(self, password):
        with pytest.raises(ValidationError, match="Weak password|too weak"):
            self._request(password)

    def test_password_from_own_name_is_weak(self):
        with pytest.raises(ValidationError, match="Weak password|too weak"):
            self._request("LovelaceAda")
