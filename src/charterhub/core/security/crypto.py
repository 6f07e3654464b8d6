"""Password hashing, session tokens and invitation tokens."""

import secrets
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from hashlib import sha256
from typing import Any
from uuid import uuid4

import argon2
from jose import JWTError, jwt

from src.charterhub.core.config import get_settings

REFRESH_TOKEN_BYTES = 48
INVITATION_TOKEN_BYTES = 32
ACCESS_TOKEN_TYPE = "access"


@lru_cache
def password_hasher() -> argon2.PasswordHasher:
    """Argon2id hasher tuned by ARGON2_* settings."""
    settings = get_settings()
    return argon2.PasswordHasher(
        time_cost=settings.argon2_time_cost,
        memory_cost=settings.argon2_memory_cost,
        parallelism=settings.argon2_parallelism,
    )


@lru_cache
def _placeholder_hash() -> str:
    return password_hasher().hash(secrets.token_hex(16))


def hash_password(password: str) -> str:
    return password_hasher().hash(password)


def verify_password(password: str, hashed: str | None) -> bool:
    """Check ``password`` against an Argon2 hash.

    Accounts without a password are checked against a throwaway hash, so an
    unknown email costs the same time as a wrong password.
    """
    try:
        return password_hasher().verify(hashed or _placeholder_hash(), password) and bool(hashed)
    except (argon2.exceptions.VerificationError, argon2.exceptions.InvalidHashError):
        return False


def hash_token(token: str) -> str:
    """SHA-256 hex digest; refresh tokens are only stored in this form."""
    return sha256(token.encode()).hexdigest()


def generate_invitation_token() -> str:
    """64 lowercase hex characters."""
    return secrets.token_hex(INVITATION_TOKEN_BYTES)


def _naive_utc(moment: datetime) -> datetime:
    return moment.astimezone(UTC).replace(tzinfo=None)


def create_access_token(
    subject: str | int,
    email: str,
    role: str,
    token_version: int,
    expires_delta: timedelta | None = None,
) -> tuple[str, datetime]:
    """Sign a JWT access token and return it with its naive-UTC expiry.

    The ``tvr`` claim holds the user's token_version at issue time. Bumping
    the stored version invalidates every access token issued before.
    """
    settings = get_settings()
    issued_at = datetime.now(UTC)
    expires_at = issued_at + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    claims = {
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "sub": str(subject),
        "jti": uuid4().hex,
        "iat": issued_at,
        "exp": expires_at,
        "type": ACCESS_TOKEN_TYPE,
        "email": email,
        "role": role,
        "tvr": token_version,
    }
    token: str = jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    return token, _naive_utc(expires_at)


def create_refresh_token() -> tuple[str, datetime]:
    """Opaque refresh token and its naive-UTC expiry. Persist only ``hash_token(token)``."""
    lifetime = timedelta(days=get_settings().refresh_token_expire_days)
    return secrets.token_urlsafe(REFRESH_TOKEN_BYTES), _naive_utc(datetime.now(UTC) + lifetime)


def decode_token(token: str) -> dict[str, Any] | None:
    """Verify signature, issuer, audience and expiry. None if any check fails."""
    settings = get_settings()
    try:
        claims: dict[str, Any] = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
        )
    except JWTError:
        return None
    return claims
