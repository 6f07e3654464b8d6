"""Invitation model - single-use registration tokens."""

from datetime import datetime

from sqlmodel import Field, SQLModel

from src.charterhub.models.base import utc_now


class Invitation(SQLModel, table=True):
    """Invitation token issued by staff to a pre-identified customer.

    Consumption is stored across three legacy columns (``is_used``, ``used``
    and ``used_at``) that all encode the same fact. Read it through
    ``consumed``; writes go through ``InvitationRepository.mark_consumed``
    which sets every column at once.
    """

    __tablename__ = "charterhub_invitations"

    id: int | None = Field(default=None, primary_key=True)
    token: str = Field(max_length=64, unique=True, index=True)
    customer_id: int | None = Field(default=None, index=True)
    email: str = Field(max_length=255, index=True)
    created_by: int | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    expires_at: datetime | None = Field(default=None)

    # Legacy consumption columns
    is_used: bool = Field(default=False)
    used: bool = Field(default=False)
    used_at: datetime | None = Field(default=None)
    used_by_user_id: int | None = Field(default=None)

    @property
    def consumed(self) -> bool:
        return bool(self.is_used or self.used or self.used_at is not None)

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return False
        return self.expires_at < (now or utc_now())
