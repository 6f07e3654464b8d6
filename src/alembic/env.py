"""Alembic environment for the CharterHub schema.

Migrations run on a synchronous driver (psycopg2) against
DATABASE_MIGRATIONS_URL, or DATABASE_URL with the driver swapped.
"""

import os
from logging.config import fileConfig
from typing import Any

from sqlalchemy import create_engine, pool
from sqlmodel import SQLModel

import src.charterhub.models  # noqa: F401  registers every table on the metadata
from alembic import context
from src.charterhub.core.config import get_settings

# Owned by the WordPress install; autogenerate must never touch it
WORDPRESS_TABLES = frozenset({"wp_users"})

if context.config.config_file_name and os.path.exists(context.config.config_file_name):
    fileConfig(context.config.config_file_name)


def include_object(
    obj: Any, name: str | None, type_: str, reflected: bool, compare_to: Any
) -> bool:
    return not (type_ == "table" and name in WORDPRESS_TABLES)


def _configure(**options: Any) -> None:
    context.configure(
        target_metadata=SQLModel.metadata,
        include_object=include_object,
        compare_type=True,
        **options,
    )


def run_offline() -> None:
    """Emit SQL to stdout instead of connecting."""
    _configure(
        url=get_settings().sync_database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_online() -> None:
    engine = create_engine(get_settings().sync_database_url, poolclass=pool.NullPool)
    try:
        with engine.connect() as connection:
            _configure(connection=connection)
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_offline()
else:
    run_online()
