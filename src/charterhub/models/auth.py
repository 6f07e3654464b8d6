"""Authentication-related models - refresh tokens."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.charterhub.models.base import utc_now


class RefreshToken(SQLModel, table=True):
    """Refresh token storage. Only the SHA-256 hash of the raw token is kept."""

    __tablename__ = "charterhub_refresh_tokens"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: int = Field(foreign_key="charterhub_users.id", index=True)
    token_hash: str = Field(max_length=255, unique=True, index=True)
    token_version: int = Field(default=1)
    issued_at: datetime = Field(default_factory=utc_now)
    expires_at: datetime = Field(index=True)
    revoked: bool = Field(default=False)
    revoked_at: datetime | None = Field(default=None)
