"""Alembic environment for the Cerebro schema.

The database URL comes from ``CEREBRO_DB_*`` settings unless
``sqlalchemy.url`` is set in alembic.ini or passed with ``-x url=...``.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from cerebro.core.settings import DatabaseSettings
from cerebro.db.base import BaseEntity
from cerebro.db.models_oauth import AuthorizationCodeEntity, OAuthTokenEntity
from cerebro.db.models_user import UserEntity

# imported for their side effect on BaseEntity.metadata
_registered = (UserEntity, AuthorizationCodeEntity, OAuthTokenEntity)

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = BaseEntity.metadata


def _database_url() -> str:
    override = context.get_x_argument(as_dictionary=True).get("url")
    return (
        override
        or config.get_main_option("sqlalchemy.url")
        or DatabaseSettings().async_url
    )


def run_migrations_offline() -> None:
    """Emit SQL to stdout instead of connecting."""
    context.configure(
        url=_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    # SQLite cannot ALTER most constraints in place
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=connection.dialect.name == "sqlite",
    )
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    engine = create_async_engine(_database_url())
    async with engine.connect() as connection:
        await connection.run_sync(do_run_migrations)
    await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
