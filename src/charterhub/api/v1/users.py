"""User profile endpoints."""

from fastapi import APIRouter

from src.charterhub.api.dependencies import CurrentUser, UserServiceDep
from src.charterhub.schemas.user import UserRead, UserUpdate, UserUpdateResponse

router = APIRouter(prefix="/users", tags=["users"])


@router.get(
    "/me",
    response_model=UserRead,
    responses={401: {"description": "Not authenticated"}},
)
async def read_me(current_user: CurrentUser) -> UserRead:
    """Get current authenticated user."""
    return UserRead.model_validate(current_user)


@router.patch(
    "/me",
    response_model=UserUpdateResponse,
    responses={
        401: {"description": "Not authenticated"},
        409: {"description": "Email already used by another client"},
    },
)
async def update_me(
    data: UserUpdate, current_user: CurrentUser, service: UserServiceDep
) -> UserUpdateResponse:
    """Update the current user's profile.

    Changing the email rotates credentials: the response carries a new token
    pair and every previously issued token stops working.
    """
    user, tokens = await service.update(current_user, data)
    return UserUpdateResponse(user=UserRead.model_validate(user), tokens=tokens)
