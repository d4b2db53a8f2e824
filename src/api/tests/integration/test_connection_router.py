"""Integration tests for schema-routed sessions.

These tests require PostgreSQL to be running.
"""

import asyncio

import pytest
from sqlalchemy import text

from shared_kernel.middleware.tenant_context import (
    ResolutionSource,
    TenantResolutionContext,
)
from tenancy.infrastructure.connection_router import TenantConnectionRouter

pytestmark = pytest.mark.integration


def _context(schema_name: str) -> TenantResolutionContext:
    return TenantResolutionContext(
        schema_name=schema_name,
        tenant_key=schema_name,
        source=ResolutionSource.HEADER,
    )


@pytest.fixture
def router(sessionmaker):
    return TenantConnectionRouter(sessionmaker)


class TestTenantConnectionRouter:
    @pytest.mark.asyncio
    async def test_every_transaction_runs_in_the_store_schema(
        self, router, schema_manager, store_schema
    ):
        schema_name = store_schema("acme")
        await schema_manager.create_schema(schema_name)

        async with router.session(_context(schema_name)) as session:
            async with session.begin():
                first = await session.scalar(text("SELECT current_schema()"))
            async with session.begin():
                second = await session.scalar(text("SELECT current_schema()"))

        assert first == second == schema_name

    @pytest.mark.asyncio
    async def test_concurrent_sessions_stay_in_their_own_schema(
        self, router, schema_manager, store_schema
    ):
        names = [store_schema(label) for label in ("acme", "globex", "initech")]
        for name in names:
            await schema_manager.create_schema(name)

        async def observe(schema_name: str) -> list[str]:
            seen = []
            async with router.session(_context(schema_name)) as session:
                for _ in range(5):
                    async with session.begin():
                        seen.append(
                            await session.scalar(text("SELECT current_schema()"))
                        )
                    await asyncio.sleep(0)
            return seen

        results = await asyncio.gather(*(observe(name) for name in names))

        for name, seen in zip(names, results):
            assert seen == [name] * 5

    @pytest.mark.asyncio
    async def test_pooled_connection_falls_back_to_registry_schema(
        self, router, engine, schema_manager, store_schema, integration_db_settings
    ):
        schema_name = store_schema("acme")
        await schema_manager.create_schema(schema_name)

        async with router.session(_context(schema_name)) as session:
            async with session.begin():
                await session.execute(text("SELECT 1"))

        # Every pooled connection, including the one just used.
        async def plain_schema() -> str:
            async with engine.connect() as conn:
                return await conn.scalar(text("SHOW search_path"))

        paths = await asyncio.gather(*(plain_schema() for _ in range(3)))
        assert all(path == integration_db_settings.registry_schema for path in paths)
