"""
Wallit Users — Alembic Environment
===================================

What:  Migrates the `users` schema with the same async driver the service uses.
How:   URL comes from `alembic -x url=...` when given, else from
       wallit.config.settings (DATABASE_URL or the DB_* parts).

Usage:
    alembic upgrade head
    alembic -x url=sqlite+aiosqlite:///./local.db upgrade head

SQLite has no ALTER COLUMN, so its migrations run in batch mode. Only tables
on Base.metadata are compared during --autogenerate; anything else sharing the
database is left alone.
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import async_engine_from_config
from alembic import context

from wallit.config import settings
from wallit.database import Base, migration_url

# Registers the users table on Base.metadata for --autogenerate
from wallit.models.user import User  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

x_args = context.get_x_argument(as_dictionary=True)
config.set_main_option("sqlalchemy.url", migration_url(settings, x_args.get("url")))


def include_object(obj, name, type_, reflected, compare_to):
    if type_ == "table" and reflected and compare_to is None:
        return name in target_metadata.tables
    return True


def configure_options(url: str) -> dict:
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "include_object": include_object,
        "render_as_batch": url.startswith("sqlite"),
    }


def run_migrations_offline() -> None:
    """Emit SQL to stdout without connecting to the database."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **configure_options(url),
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection):
    context.configure(
        connection=connection,
        **configure_options(connection.engine.url.drivername),
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_async_migrations())
