"""User models - CharterHub accounts and the legacy WordPress user table."""

from datetime import datetime

from sqlalchemy import Column, Integer, String, UniqueConstraint
from sqlmodel import Field, SQLModel

from src.charterhub.models.base import utc_now
from src.charterhub.models.enums import UserRole


class User(SQLModel, table=True):
    """CharterHub account. Email is unique per role, so a client and a staff
    member may share an address."""

    __tablename__ = "charterhub_users"
    __table_args__ = (UniqueConstraint("email", "role", name="uq_charterhub_users_email_role"),)

    id: int | None = Field(default=None, primary_key=True)
    email: str = Field(max_length=255, index=True)
    hashed_password: str | None = Field(default=None, max_length=255)
    first_name: str = Field(default="", max_length=100)
    last_name: str = Field(default="", max_length=100)
    display_name: str = Field(default="", max_length=200)
    phone_number: str | None = Field(default=None, max_length=50)
    company: str | None = Field(default=None, max_length=200)
    role: str = Field(default=UserRole.CLIENT.value, max_length=20)
    verified: bool = Field(default=False)
    token_version: int = Field(default=1)
    last_login: datetime | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_staff(self) -> bool:
        return self.role == UserRole.ADMIN.value


class LegacyUser(SQLModel, table=True):
    """Read-only view of the WordPress ``wp_users`` table.

    Older customers were provisioned there before the CharterHub table existed,
    so invitations may still point at these ids.
    """

    __tablename__ = "wp_users"

    id: int | None = Field(default=None, sa_column=Column("ID", Integer, primary_key=True))
    user_email: str = Field(sa_column=Column("user_email", String(100), nullable=False))
    display_name: str = Field(
        default="", sa_column=Column("display_name", String(250), nullable=False)
    )
