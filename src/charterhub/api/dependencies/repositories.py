"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.charterhub.api.dependencies.db import DBSession
from src.charterhub.repositories import (
    AuditLogRepository,
    InvitationRepository,
    RefreshTokenRepository,
    UserRepository,
)


def get_user_repository(session: DBSession) -> UserRepository:
    return UserRepository(session)


def get_token_repository(session: DBSession) -> RefreshTokenRepository:
    return RefreshTokenRepository(session)


def get_invitation_repository(session: DBSession) -> InvitationRepository:
    return InvitationRepository(session)


def get_audit_repository(session: DBSession) -> AuditLogRepository:
    return AuditLogRepository(session)


UserRepo = Annotated[UserRepository, Depends(get_user_repository)]
TokenRepo = Annotated[RefreshTokenRepository, Depends(get_token_repository)]
InvitationRepo = Annotated[InvitationRepository, Depends(get_invitation_repository)]
AuditRepo = Annotated[AuditLogRepository, Depends(get_audit_repository)]
