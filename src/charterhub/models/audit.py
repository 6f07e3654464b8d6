"""Audit log model for authentication and invitation events."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, Index
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from src.charterhub.models.base import utc_now
from src.charterhub.models.enums import AuditStatus


class AuditLog(SQLModel, table=True):
    """Append-only audit trail.

    ``details`` is JSONB on PostgreSQL and plain JSON elsewhere.
    """

    __tablename__ = "charterhub_auth_logs"
    __table_args__ = (
        Index("ix_charterhub_auth_logs_user_created", "user_id", "created_at"),
        Index("ix_charterhub_auth_logs_action_created", "action", "created_at"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: int | None = Field(default=None, index=True)
    action: str = Field(max_length=50)  # AuditAction value
    status: str = Field(default=AuditStatus.SUCCESS.value, max_length=20)
    details: dict[str, Any] | None = Field(
        default=None,
        sa_column=Column(JSON().with_variant(JSONB(), "postgresql"), nullable=True),
    )
    ip_address: str | None = Field(max_length=45, default=None)
    request_id: str | None = Field(max_length=64, default=None)
    created_at: datetime = Field(default_factory=utc_now, index=True)
