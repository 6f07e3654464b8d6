"""Initial CharterHub schema

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
import sqlmodel
from sqlalchemy.dialects.postgresql import JSONB

from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # 1. Users
    op.create_table(
        "charterhub_users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column("hashed_password", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column("first_name", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column("last_name", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column("display_name", sqlmodel.sql.sqltypes.AutoString(length=200), nullable=False),
        sa.Column("phone_number", sqlmodel.sql.sqltypes.AutoString(length=50), nullable=True),
        sa.Column("company", sqlmodel.sql.sqltypes.AutoString(length=200), nullable=True),
        sa.Column(
            "role",
            sqlmodel.sql.sqltypes.AutoString(length=20),
            nullable=False,
            server_default="client",
        ),
        sa.Column("verified", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("token_version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("last_login", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", "role", name="uq_charterhub_users_email_role"),
    )
    op.create_index("ix_charterhub_users_email", "charterhub_users", ["email"], unique=False)

    # 2. Invitations
    op.create_table(
        "charterhub_invitations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("token", sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column("customer_id", sa.Integer(), nullable=True),
        sa.Column("email", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column("created_by", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=True),
        sa.Column("is_used", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("used", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("used_at", sa.DateTime(), nullable=True),
        sa.Column("used_by_user_id", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_charterhub_invitations_token", "charterhub_invitations", ["token"], unique=True
    )
    op.create_index(
        "ix_charterhub_invitations_customer_id",
        "charterhub_invitations",
        ["customer_id"],
        unique=False,
    )
    op.create_index(
        "ix_charterhub_invitations_email", "charterhub_invitations", ["email"], unique=False
    )

    # 3. Refresh tokens
    op.create_table(
        "charterhub_refresh_tokens",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("token_hash", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column("token_version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("issued_at", sa.DateTime(), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("revoked", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("revoked_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["charterhub_users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_charterhub_refresh_tokens_user_id",
        "charterhub_refresh_tokens",
        ["user_id"],
        unique=False,
    )
    op.create_index(
        "ix_charterhub_refresh_tokens_token_hash",
        "charterhub_refresh_tokens",
        ["token_hash"],
        unique=True,
    )
    op.create_index(
        "ix_charterhub_refresh_tokens_expires_at",
        "charterhub_refresh_tokens",
        ["expires_at"],
        unique=False,
    )

    # 4. Audit log
    op.create_table(
        "charterhub_auth_logs",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="success"),
        sa.Column("details", sa.JSON().with_variant(JSONB(), "postgresql"), nullable=True),
        sa.Column("ip_address", sa.String(length=45), nullable=True),
        sa.Column("request_id", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_charterhub_auth_logs_user_id", "charterhub_auth_logs", ["user_id"], unique=False
    )
    op.create_index(
        "ix_charterhub_auth_logs_created_at", "charterhub_auth_logs", ["created_at"], unique=False
    )
    op.create_index(
        "ix_charterhub_auth_logs_user_created",
        "charterhub_auth_logs",
        ["user_id", "created_at"],
        unique=False,
    )
    op.create_index(
        "ix_charterhub_auth_logs_action_created",
        "charterhub_auth_logs",
        ["action", "created_at"],
        unique=False,
    )

    # 5. wp_users is owned by WordPress; create it only on fresh databases
    inspector = sa.inspect(op.get_bind())
    if not inspector.has_table("wp_users"):
        op.create_table(
            "wp_users",
            sa.Column("ID", sa.Integer(), autoincrement=True, nullable=False),
            sa.Column("user_email", sa.String(length=100), nullable=False, server_default=""),
            sa.Column("display_name", sa.String(length=250), nullable=False, server_default=""),
            sa.PrimaryKeyConstraint("ID"),
        )


def downgrade() -> None:
    op.drop_index("ix_charterhub_auth_logs_action_created", table_name="charterhub_auth_logs")
    op.drop_index("ix_charterhub_auth_logs_user_created", table_name="charterhub_auth_logs")
    op.drop_index("ix_charterhub_auth_logs_created_at", table_name="charterhub_auth_logs")
    op.drop_index("ix_charterhub_auth_logs_user_id", table_name="charterhub_auth_logs")
    op.drop_table("charterhub_auth_logs")

    op.drop_index(
        "ix_charterhub_refresh_tokens_expires_at", table_name="charterhub_refresh_tokens"
    )
    op.drop_index(
        "ix_charterhub_refresh_tokens_token_hash", table_name="charterhub_refresh_tokens"
    )
    op.drop_index("ix_charterhub_refresh_tokens_user_id", table_name="charterhub_refresh_tokens")
    op.drop_table("charterhub_refresh_tokens")

    op.drop_index("ix_charterhub_invitations_email", table_name="charterhub_invitations")
    op.drop_index("ix_charterhub_invitations_customer_id", table_name="charterhub_invitations")
    op.drop_index("ix_charterhub_invitations_token", table_name="charterhub_invitations")
    op.drop_table("charterhub_invitations")

    op.drop_index("ix_charterhub_users_email", table_name="charterhub_users")
    op.drop_table("charterhub_users")
