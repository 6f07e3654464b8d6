"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.charterhub.api.dependencies.db import DBSession
from src.charterhub.api.dependencies.repositories import (
    AuditRepo,
    InvitationRepo,
    TokenRepo,
    UserRepo,
)
from src.charterhub.services import (
    AuditService,
    AuthService,
    CredentialService,
    InvitationConsumer,
    InvitationValidator,
    InviteService,
    RegistrationService,
    UserService,
    default_identity_resolver,
)


def get_audit_service(audit_repo: AuditRepo, session: DBSession) -> AuditService:
    return AuditService(audit_repo, session)


AuditServiceDep = Annotated[AuditService, Depends(get_audit_service)]


def get_credential_service(
    user_repo: UserRepo,
    token_repo: TokenRepo,
    audit_service: AuditServiceDep,
    session: DBSession,
) -> CredentialService:
    return CredentialService(user_repo, token_repo, audit_service, session)


CredentialServiceDep = Annotated[CredentialService, Depends(get_credential_service)]


def get_invitation_validator(
    invitation_repo: InvitationRepo, session: DBSession
) -> InvitationValidator:
    """Validator probing CharterHub users, then legacy WordPress users."""
    return InvitationValidator(invitation_repo, default_identity_resolver(session), session)


InvitationValidatorDep = Annotated[InvitationValidator, Depends(get_invitation_validator)]


def get_invitation_consumer(
    invitation_repo: InvitationRepo,
    audit_service: AuditServiceDep,
    session: DBSession,
) -> InvitationConsumer:
    return InvitationConsumer(invitation_repo, audit_service, session)


InvitationConsumerDep = Annotated[InvitationConsumer, Depends(get_invitation_consumer)]


def get_invite_service(
    invitation_repo: InvitationRepo,
    user_repo: UserRepo,
    audit_service: AuditServiceDep,
    session: DBSession,
) -> InviteService:
    return InviteService(invitation_repo, user_repo, audit_service, session)


InviteServiceDep = Annotated[InviteService, Depends(get_invite_service)]


def get_registration_service(
    validator: InvitationValidatorDep,
    consumer: InvitationConsumerDep,
    credentials: CredentialServiceDep,
    user_repo: UserRepo,
    audit_service: AuditServiceDep,
    session: DBSession,
) -> RegistrationService:
    return RegistrationService(validator, consumer, credentials, user_repo, audit_service, session)


RegistrationServiceDep = Annotated[RegistrationService, Depends(get_registration_service)]


def get_auth_service(
    user_repo: UserRepo,
    token_repo: TokenRepo,
    credentials: CredentialServiceDep,
    audit_service: AuditServiceDep,
    session: DBSession,
) -> AuthService:
    return AuthService(user_repo, token_repo, credentials, audit_service, session)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


def get_user_service(
    user_repo: UserRepo,
    credentials: CredentialServiceDep,
    audit_service: AuditServiceDep,
    session: DBSession,
) -> UserService:
    return UserService(user_repo, credentials, audit_service, session)


UserServiceDep = Annotated[UserService, Depends(get_user_service)]
