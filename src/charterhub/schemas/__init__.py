from src.charterhub.schemas.auth import (
    CredentialPair,
    LoginRequest,
    LogoutRequest,
    RefreshRequest,
    RegisterRequest,
)
from src.charterhub.schemas.invitation import (
    ConsumeRequest,
    ConsumeResponse,
    ConsumptionReceipt,
    CustomerIdentity,
    InvitationCreateRequest,
    InvitationCreateResponse,
    InvitationRead,
    InvitationValidateResponse,
    ResolvedInvitation,
)
from src.charterhub.schemas.user import (
    AuthSessionResponse,
    UserRead,
    UserUpdate,
    UserUpdateResponse,
)

__all__ = [
    # Auth
    "CredentialPair",
    "LoginRequest",
    "LogoutRequest",
    "RefreshRequest",
    "RegisterRequest",
    # Invitation
    "ConsumeRequest",
    "ConsumeResponse",
    "ConsumptionReceipt",
    "CustomerIdentity",
    "InvitationCreateRequest",
    "InvitationCreateResponse",
    "InvitationRead",
    "InvitationValidateResponse",
    "ResolvedInvitation",
    # User
    "AuthSessionResponse",
    "UserRead",
    "UserUpdate",
    "UserUpdateResponse",
]
