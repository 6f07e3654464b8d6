"""Invitation endpoints - validation, consumption and staff issuing."""

from fastapi import APIRouter, status
from starlette.requests import Request

from src.charterhub.api.dependencies import (
    InvitationConsumerDep,
    InvitationValidatorDep,
    InviteServiceDep,
    StaffUser,
)
from src.charterhub.core.config import get_settings
from src.charterhub.core.rate_limit import limiter
from src.charterhub.schemas.invitation import (
    ConsumeRequest,
    ConsumeResponse,
    InvitationCreateRequest,
    InvitationCreateResponse,
    InvitationValidateResponse,
)

router = APIRouter(prefix="/invitations", tags=["invitations"])

_ERROR_RESPONSES: dict[int | str, dict[str, str]] = {
    400: {"description": "Missing token"},
    404: {"description": "Unknown invitation token (invalid_token)"},
    409: {"description": "Invitation already used (token_used)"},
    410: {"description": "Invitation expired (token_expired)"},
    422: {"description": "Invitation has no customer reference (invalid_invitation)"},
    500: {"description": "Storage failure (database_error)"},
}


@router.get(
    "/validate",
    response_model=InvitationValidateResponse,
    responses=_ERROR_RESPONSES,
)
@limiter.limit(get_settings().invitation_validate_rate_limit)
async def validate_invitation(
    request: Request,
    validator: InvitationValidatorDep,
    token: str = "",
) -> InvitationValidateResponse:
    """Check an invitation token and return the customer it belongs to.

    Read only. A used token reports ``token_used`` even if it has also
    expired, along with the customer id and email so the client can send the
    user to login instead.
    """
    resolved = await validator.validate(token)
    return InvitationValidateResponse(**resolved.model_dump())


@router.post(
    "/consume",
    response_model=ConsumeResponse,
    responses={
        400: {"description": "Missing token"},
        404: {"description": "Unknown invitation token (invalid_token)"},
        500: {"description": "Storage failure (database_error)"},
    },
)
async def consume_invitation(
    data: ConsumeRequest, consumer: InvitationConsumerDep
) -> ConsumeResponse:
    """Mark an invitation as used.

    Idempotent: consuming an already used token succeeds with
    ``already_consumed: true``.
    """
    receipt = await consumer.consume(data.token, used_by_user_id=data.user_id)
    return ConsumeResponse(consumed=receipt.consumed, already_consumed=receipt.already_consumed)


@router.post(
    "",
    response_model=InvitationCreateResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        403: {"description": "Staff privileges required"},
        404: {"description": "Customer not found"},
    },
)
async def create_invitation(
    data: InvitationCreateRequest,
    staff: StaffUser,
    service: InviteServiceDep,
) -> InvitationCreateResponse:
    """Invite a customer to complete registration (staff only)."""
    invitation, invitation_url = await service.create_invitation(data, created_by=staff)
    return InvitationCreateResponse(
        id=invitation.id,  # type: ignore[arg-type]
        customer_id=invitation.customer_id,  # type: ignore[arg-type]
        email=invitation.email,
        expires_at=invitation.expires_at,
        invitation_url=invitation_url,
    )
