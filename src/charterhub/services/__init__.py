from src.charterhub.services.audit_service import AuditService
from src.charterhub.services.auth_service import AuthService
from src.charterhub.services.credential_service import CredentialService
from src.charterhub.services.identity_resolver import (
    IdentityResolver,
    LegacyUserLookup,
    PrimaryUserLookup,
    default_identity_resolver,
)
from src.charterhub.services.invitation_consumer import InvitationConsumer
from src.charterhub.services.invitation_validator import InvitationValidator
from src.charterhub.services.invite_service import InviteService
from src.charterhub.services.registration_service import RegistrationService
from src.charterhub.services.user_service import UserService

__all__ = [
    "AuditService",
    "AuthService",
    "CredentialService",
    "IdentityResolver",
    "InvitationConsumer",
    "InvitationValidator",
    "InviteService",
    "LegacyUserLookup",
    "PrimaryUserLookup",
    "RegistrationService",
    "UserService",
    "default_identity_resolver",
]
