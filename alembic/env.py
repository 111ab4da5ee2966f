"""Alembic environment configuration."""

import os
from logging.config import fileConfig
from typing import TYPE_CHECKING

from sqlalchemy import engine_from_config, pool

from alembic import context

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

config = context.config

# Keep application loggers alive when migrations run inside the app process
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

import fresh_grocery.models  # noqa: E402, F401
from fresh_grocery.extensions import db  # noqa: E402

target_metadata = db.metadata


def get_url() -> str:
    """Get database URL from environment or config."""
    url = os.getenv("DATABASE_URL")
    if url:
        return url

    return config.get_main_option("sqlalchemy.url", "")


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode, emitting SQL to the script output."""
    url = get_url()
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=url.startswith("sqlite"),
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode against a live connection."""
    configuration = config.get_section(config.config_ini_section)
    if configuration is not None:
        configuration["sqlalchemy.url"] = get_url()

    # Reuse externally provided connection (e.g., in tests) when available
    existing_connection = config.attributes.get("connection")
    if existing_connection is not None:
        context.configure(
            connection=existing_connection,
            target_metadata=target_metadata,
            render_as_batch=existing_connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()
        return

    connectable: Engine = engine_from_config(
        configuration or {},
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
