"""Alembic environment configuration for the seguimiento de obras project."""

from __future__ import annotations

import logging
import os
from logging.config import fileConfig

from alembic import context
from flask import current_app
from sqlalchemy import engine_from_config, pool

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)
logger = logging.getLogger('alembic.env')

target_metadata = current_app.extensions['migrate'].db.metadata


def _escape_percent(url: str) -> str:
    return url.replace("%", "%%")


def _get_url() -> str:
    """ALEMBIC_DATABASE_URL tiene prioridad sobre la URL de la app"""
    url = os.getenv("ALEMBIC_DATABASE_URL") or current_app.config.get("SQLALCHEMY_DATABASE_URI")
    if not url:
        raise RuntimeError("No database URL available for Alembic")
    config.set_main_option("sqlalchemy.url", _escape_percent(url))
    return url


def run_migrations_offline() -> None:
    context.configure(
        url=_get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    _get_url()
    connectable = engine_from_config(
        config.get_section(config.config_ini_section) or {},
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()
        logger.info("Migraciones aplicadas en %s", connection.dialect.name)


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
