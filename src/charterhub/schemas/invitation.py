"""Invitation schemas."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from src.charterhub.models.enums import IdentitySource


class InvitationRead(BaseModel):
    """Public fields of an invitation."""

    id: int
    token: str
    customer_id: int | None
    created_at: datetime
    expires_at: datetime | None

    model_config = {"from_attributes": True}


class CustomerIdentity(BaseModel):
    """Minimal customer identity an invitation resolves to."""

    id: int
    email: str
    first_name: str = ""
    last_name: str = ""


class ResolvedInvitation(BaseModel):
    """Result of a successful invitation validation."""

    invitation: InvitationRead
    customer: CustomerIdentity
    source: IdentitySource


class InvitationValidateResponse(ResolvedInvitation):
    valid: bool = True


class ConsumptionReceipt(BaseModel):
    """Outcome of consuming an invitation.

    ``consumed`` is always true on success; ``already_consumed`` tells a
    retry apart from the call that actually performed the transition.
    """

    consumed: bool = True
    already_consumed: bool
    affected_rows: int
    consumed_at: datetime | None = None


class ConsumeRequest(BaseModel):
    token: str
    user_id: int | None = None


class ConsumeResponse(BaseModel):
    consumed: bool
    already_consumed: bool


class InvitationCreateRequest(BaseModel):
    """Staff request to invite a customer."""

    email: EmailStr
    customer_id: int | None = Field(None, gt=0)
    first_name: str = Field("", max_length=100)
    last_name: str = Field("", max_length=100)


class InvitationCreateResponse(BaseModel):
    id: int
    customer_id: int
    email: str
    expires_at: datetime | None
    invitation_url: str
    message: str = "Invitation sent successfully"
