"""Shared enums for models."""

from enum import Enum


class UserRole(str, Enum):
    """Account role. ADMIN is staff; everyone else is a CLIENT."""

    CLIENT = "client"
    ADMIN = "admin"


class IdentitySource(str, Enum):
    """Where an invitation's customer identity was resolved from."""

    PRIMARY = "primary"
    FALLBACK = "fallback"
    SYNTHESIZED = "synthesized"


class AuditAction(str, Enum):
    """Audit action types for type-safe logging."""

    # Invitations
    INVITATION_CREATED = "invitation_created"
    INVITATION_USED = "invitation_used"

    # Auth
    USER_REGISTER = "user_register"
    USER_LOGIN = "user_login"
    USER_LOGOUT = "user_logout"
    TOKEN_ISSUED = "token_issued"
    TOKEN_REFRESH = "token_refresh"
    TOKEN_ROTATED = "token_rotated"

    # Profile
    USER_UPDATE = "user_update"


class AuditStatus(str, Enum):
    """Audit log status."""

    SUCCESS = "success"
    FAILURE = "failure"
