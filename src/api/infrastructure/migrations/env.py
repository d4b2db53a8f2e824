"""Alembic environment for the tenant registry schema.

Run with ``alembic upgrade head`` from the repository root. Connection
settings come from DatabaseSettings, so the same GOCOMMERCE_DB_* variables
drive the application and its migrations.
"""

import asyncio

from alembic import context
from sqlalchemy import Connection, text

from infrastructure.database.engines import create_write_engine
from infrastructure.database.models import Base
from infrastructure.settings import get_database_settings
from tenancy.infrastructure.identifiers import quote_schema
from tenancy.infrastructure.models import TenantModel  # noqa: F401 - registers table

config = context.config
target_metadata = Base.metadata


def do_run_migrations(connection: Connection) -> None:
    registry_schema = get_database_settings().registry_schema
    quoted = quote_schema(registry_schema)
    connection.execute(text(f"CREATE SCHEMA IF NOT EXISTS {quoted}"))
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        version_table_schema=registry_schema,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """Run registry migrations on an async engine."""
    engine = create_write_engine(get_database_settings())

    async with engine.connect() as connection:
        await connection.run_sync(do_run_migrations)
        await connection.commit()

    await engine.dispose()


if context.is_offline_mode():
    raise RuntimeError("Registry migrations do not support offline mode")

asyncio.run(run_migrations_online())
