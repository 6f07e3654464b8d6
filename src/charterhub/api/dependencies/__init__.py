"""FastAPI dependency injection definitions."""

from src.charterhub.api.dependencies.auth import (
    CurrentUser,
    StaffUser,
    get_current_user,
    require_staff,
)
from src.charterhub.api.dependencies.db import DBSession, get_db_session
from src.charterhub.api.dependencies.services import (
    AuthServiceDep,
    CredentialServiceDep,
    InvitationConsumerDep,
    InvitationValidatorDep,
    InviteServiceDep,
    RegistrationServiceDep,
    UserServiceDep,
)

__all__ = [
    # Database
    "DBSession",
    "get_db_session",
    # Auth
    "CurrentUser",
    "StaffUser",
    "get_current_user",
    "require_staff",
    # Services
    "AuthServiceDep",
    "CredentialServiceDep",
    "InvitationConsumerDep",
    "InvitationValidatorDep",
    "InviteServiceDep",
    "RegistrationServiceDep",
    "UserServiceDep",
]
