"""Repository layer - data access abstraction."""

from src.charterhub.repositories.audit import AuditLogRepository
from src.charterhub.repositories.base import BaseRepository
from src.charterhub.repositories.invitation import InvitationRepository, open_clause
from src.charterhub.repositories.token import RefreshTokenRepository
from src.charterhub.repositories.user import LegacyUserRepository, UserRepository

__all__ = [
    "AuditLogRepository",
    "BaseRepository",
    "InvitationRepository",
    "LegacyUserRepository",
    "RefreshTokenRepository",
    "UserRepository",
    "open_clause",
]
