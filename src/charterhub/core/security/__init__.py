"""Security utilities - crypto and HTTP headers."""

from src.charterhub.core.security.crypto import (
    create_access_token,
    create_refresh_token,
    decode_token,
    generate_invitation_token,
    hash_password,
    hash_token,
    verify_password,
)
from src.charterhub.core.security.headers import SecurityHeadersMiddleware

__all__ = [
    "create_access_token",
    "create_refresh_token",
    "decode_token",
    "generate_invitation_token",
    "hash_password",
    "hash_token",
    "verify_password",
    "SecurityHeadersMiddleware",
]
