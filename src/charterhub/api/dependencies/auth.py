"""Authentication and authorization dependencies."""

from typing import Annotated, Any

from fastapi import Depends, Header, HTTPException, status

from src.charterhub.api.dependencies.services import UserServiceDep
from src.charterhub.core.logging import bind_user_context
from src.charterhub.core.security.crypto import ACCESS_TOKEN_TYPE, decode_token
from src.charterhub.models import User


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _decode_bearer(authorization: str | None) -> dict[str, Any]:
    if not authorization or not authorization.startswith("Bearer "):
        raise _unauthorized("Missing or invalid authorization header")

    payload = decode_token(authorization[7:])
    if payload is None:
        raise _unauthorized("Invalid or expired token")
    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise _unauthorized("Invalid token type")
    return payload


async def get_current_user(
    user_service: UserServiceDep,
    authorization: Annotated[str | None, Header()] = None,
) -> User:
    """Validate the bearer access token and return its user.

    The token's ``tvr`` claim must equal the user's stored token_version, so
    bumping the version (credential rotation) invalidates older tokens.
    """
    payload = _decode_bearer(authorization)

    try:
        user_id = int(payload.get("sub", ""))
    except ValueError as e:
        raise _unauthorized("Invalid token payload") from e

    user = await user_service.get_by_id(user_id)
    if user is None:
        raise _unauthorized("User not found")

    if payload.get("tvr") != user.token_version:
        raise _unauthorized("Token has been revoked")

    bind_user_context(user_id, user.role, user.email)
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


async def require_staff(current_user: CurrentUser) -> User:
    """Require a staff (admin role) account."""
    if not current_user.is_staff:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Staff privileges required",
        )
    return current_user


StaffUser = Annotated[User, Depends(require_staff)]
