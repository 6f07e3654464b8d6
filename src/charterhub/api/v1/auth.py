"""Authentication endpoints."""

from fastapi import APIRouter, HTTPException, Response, status
from starlette.requests import Request

from src.charterhub.api.dependencies import AuthServiceDep, RegistrationServiceDep
from src.charterhub.core.config import get_settings
from src.charterhub.core.rate_limit import limiter
from src.charterhub.schemas.auth import (
    CredentialPair,
    LoginRequest,
    LogoutRequest,
    RefreshRequest,
    RegisterRequest,
)
from src.charterhub.schemas.user import AuthSessionResponse, UserRead

router = APIRouter(prefix="/auth", tags=["auth"])

settings = get_settings()


@router.post(
    "/register",
    response_model=AuthSessionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"description": "Unknown invitation token"},
        409: {"description": "Invitation already used or email already registered"},
        410: {"description": "Invitation expired"},
        422: {"description": "Invalid invitation or weak password"},
    },
)
@limiter.limit(settings.register_rate_limit)
async def register(
    request: Request, data: RegisterRequest, service: RegistrationServiceDep
) -> AuthSessionResponse:
    """Complete an invited registration and return session credentials.

    The invitation is consumed in the same transaction that activates the
    account, so a failed registration leaves it usable.
    """
    user, tokens = await service.complete_invited_registration(data)
    return AuthSessionResponse(user=UserRead.model_validate(user), tokens=tokens)


@router.post(
    "/login",
    response_model=AuthSessionResponse,
    responses={401: {"description": "Invalid credentials"}},
)
@limiter.limit(settings.login_rate_limit)
async def login(
    request: Request, data: LoginRequest, service: AuthServiceDep
) -> AuthSessionResponse:
    """Authenticate with email and password."""
    result = await service.authenticate(data.email, data.password)
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )
    user, tokens = result
    return AuthSessionResponse(user=UserRead.model_validate(user), tokens=tokens)


@router.post(
    "/refresh",
    response_model=CredentialPair,
    responses={401: {"description": "Invalid, expired or revoked refresh token"}},
)
async def refresh(data: RefreshRequest, service: AuthServiceDep) -> CredentialPair:
    """Exchange a refresh token for a new pair. The old refresh token is revoked."""
    tokens = await service.refresh(data.refresh_token)
    if tokens is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired refresh token",
        )
    return tokens


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(data: LogoutRequest, service: AuthServiceDep) -> Response:
    """Revoke a refresh token. Succeeds even if the token was already revoked."""
    await service.logout(data.refresh_token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
