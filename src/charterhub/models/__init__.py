"""Model exports.

Import from here: `from src.charterhub.models import User, Invitation`
"""

from src.charterhub.models.audit import AuditLog
from src.charterhub.models.auth import RefreshToken
from src.charterhub.models.enums import AuditAction, AuditStatus, IdentitySource, UserRole
from src.charterhub.models.invitation import Invitation
from src.charterhub.models.user import LegacyUser, User

__all__ = [
    # Enums
    "AuditAction",
    "AuditStatus",
    "IdentitySource",
    "UserRole",
    # Models
    "AuditLog",
    "Invitation",
    "LegacyUser",
    "RefreshToken",
    "User",
]
