"""Integration test fixtures for database tests.

These fixtures require a running PostgreSQL instance. Each test gets its
own registry schema, and every store schema a test creates carries a
per-test prefix so it can be dropped afterwards.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from pydantic import SecretStr
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_write_engine
from infrastructure.database.models import Base
from infrastructure.settings import DatabaseSettings
from tenancy.infrastructure.models import TenantModel  # noqa: F401 - registers table
from tenancy.infrastructure.schema_manager import SchemaLifecycleManager
from tenancy.infrastructure.tenant_registry import registry_scope_factory
from tenancy.ports.repositories import RegistryScope

STORE_MIGRATIONS = "tenancy.infrastructure:tenant_migrations"


@pytest.fixture
def test_run_id() -> str:
    """Short random suffix that keeps parallel runs apart."""
    return uuid.uuid4().hex[:8]


@pytest.fixture
def integration_db_settings(test_run_id: str) -> DatabaseSettings:
    """Database settings for integration tests.

    Override with environment variables:
        GOCOMMERCE_DB_HOST, GOCOMMERCE_DB_PORT, etc.
    """
    return DatabaseSettings(
        host=os.getenv("GOCOMMERCE_DB_HOST", "localhost"),
        port=int(os.getenv("GOCOMMERCE_DB_PORT", "5432")),
        database=os.getenv("GOCOMMERCE_DB_DATABASE", "gocommerce"),
        username=os.getenv("GOCOMMERCE_DB_USERNAME", "gocommerce"),
        password=SecretStr(
            os.getenv("GOCOMMERCE_DB_PASSWORD", "gocommerce_dev_password")
        ),
        registry_schema=f"registry_it_{test_run_id}",
        pool_min_connections=1,
        pool_max_connections=5,
    )


@pytest.fixture
def store_schema(test_run_id: str) -> Callable[[str], str]:
    """Build store schema names that the engine fixture cleans up."""
    return lambda name: f"store_it_{test_run_id}_{name}"


@pytest_asyncio.fixture
async def engine(
    integration_db_settings: DatabaseSettings, test_run_id: str
) -> AsyncGenerator[AsyncEngine, None]:
    """Engine whose connections default to a fresh registry schema.

    Drops the registry schema and every store schema of this test run on
    teardown.
    """
    registry_schema = integration_db_settings.registry_schema
    engine = create_write_engine(integration_db_settings)

    async with engine.begin() as conn:
        await conn.execute(text(f'CREATE SCHEMA IF NOT EXISTS "{registry_schema}"'))
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        result = await conn.execute(
            text(
                "SELECT schema_name FROM information_schema.schemata "
                "WHERE schema_name LIKE :pattern"
            ),
            {"pattern": f"store_it_{test_run_id}_%"},
        )
        for schema_name in result.scalars().all():
            await conn.execute(text(f'DROP SCHEMA IF EXISTS "{schema_name}" CASCADE'))
        await conn.execute(text(f'DROP SCHEMA IF EXISTS "{registry_schema}" CASCADE'))
    await engine.dispose()


@pytest.fixture
def sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
def registry_scope(sessionmaker: async_sessionmaker[AsyncSession]) -> RegistryScope:
    return registry_scope_factory(sessionmaker)


@pytest.fixture
def schema_manager(engine: AsyncEngine) -> SchemaLifecycleManager:
    return SchemaLifecycleManager(engine=engine, migrations_location=STORE_MIGRATIONS)
