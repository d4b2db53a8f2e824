"""Integration tests for TenantRegistry.

These tests require PostgreSQL to be running. They verify uniqueness
across soft-deleted rows and the conditional updates on version.
"""

import asyncio

import pytest

from tenancy.domain.tenant import Tenant
from tenancy.domain.value_objects import TenantStatus
from tenancy.ports.exceptions import (
    ConcurrentModificationError,
    DuplicateTenantError,
    TenantNotFoundError,
)

pytestmark = pytest.mark.integration


def _tenant(key: str = "acme-co", subdomain: str = "acme") -> Tenant:
    return Tenant.register(
        key=key,
        name=key.title(),
        subdomain=subdomain,
        schema_name=f"store_{key.replace('-', '_')}",
    )


class TestRoundTrip:
    @pytest.mark.asyncio
    async def test_inserts_and_finds_by_key_and_subdomain(self, registry_scope):
        async with registry_scope() as registry:
            inserted = await registry.insert(_tenant())

        async with registry_scope() as registry:
            by_key = await registry.find_by_key("ACME-CO")
            by_subdomain = await registry.find_by_subdomain("acme")

        assert by_key is not None
        assert by_key.id == inserted.id
        assert by_key.status is TenantStatus.PENDING
        assert by_key.version == 0
        assert by_key.created_at is not None
        assert by_subdomain == by_key

    @pytest.mark.asyncio
    async def test_scope_rolls_back_when_the_block_raises(self, registry_scope):
        with pytest.raises(RuntimeError):
            async with registry_scope() as registry:
                await registry.insert(_tenant())
                raise RuntimeError("abort")

        async with registry_scope() as registry:
            assert await registry.exists_by_key("acme-co") is False


class TestUniqueness:
    @pytest.mark.asyncio
    async def test_subdomain_of_a_deleted_store_stays_taken(self, registry_scope):
        async with registry_scope() as registry:
            await registry.insert(_tenant())
            await registry.soft_delete("acme-co", 0)

        async with registry_scope() as registry:
            assert await registry.find_by_key("acme-co") is None
            assert await registry.exists_by_subdomain("acme") is True

        with pytest.raises(DuplicateTenantError) as exc_info:
            async with registry_scope() as registry:
                await registry.insert(_tenant(key="acme-two", subdomain="acme"))

        assert exc_info.value.field == "subdomain"

    @pytest.mark.asyncio
    async def test_concurrent_inserts_of_one_key_admit_exactly_one(
        self, registry_scope
    ):
        async def insert(subdomain: str):
            async with registry_scope() as registry:
                return await registry.insert(_tenant(subdomain=subdomain))

        results = await asyncio.gather(
            insert("acme-a"), insert("acme-b"), return_exceptions=True
        )

        winners = [r for r in results if isinstance(r, Tenant)]
        losers = [r for r in results if isinstance(r, DuplicateTenantError)]
        assert len(winners) == 1
        assert len(losers) == 1
        assert losers[0].field in ("key", "schema_name")


class TestConditionalUpdates:
    @pytest.mark.asyncio
    async def test_each_update_increments_version(self, registry_scope):
        async with registry_scope() as registry:
            await registry.insert(_tenant())
            configured = await registry.update_settings(
                "acme-co", {"currency": "EUR"}, 0
            )
            active = await registry.update_status("acme-co", TenantStatus.ACTIVE, 1)

        assert configured.version == 1
        assert configured.settings == {"currency": "EUR"}
        assert active.version == 2
        assert active.status is TenantStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_stale_version_changes_nothing(self, registry_scope):
        async with registry_scope() as registry:
            await registry.insert(_tenant())
            await registry.update_status("acme-co", TenantStatus.ACTIVE, 0)

        with pytest.raises(ConcurrentModificationError) as exc_info:
            async with registry_scope() as registry:
                await registry.update_status("acme-co", TenantStatus.SUSPENDED, 0)

        assert exc_info.value.actual_version == 1
        async with registry_scope() as registry:
            current = await registry.find_by_key("acme-co")
        assert current.status is TenantStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_deleted_store_cannot_be_updated(self, registry_scope):
        async with registry_scope() as registry:
            await registry.insert(_tenant())
            await registry.soft_delete("acme-co", 0)

        with pytest.raises(TenantNotFoundError):
            async with registry_scope() as registry:
                await registry.update_status("acme-co", TenantStatus.ACTIVE, 1)

    @pytest.mark.asyncio
    async def test_list_hides_deleted_unless_asked(self, registry_scope):
        async with registry_scope() as registry:
            await registry.insert(_tenant())
            await registry.insert(_tenant(key="globex", subdomain="globex"))
            await registry.soft_delete("globex", 0)

        async with registry_scope() as registry:
            live = await registry.list_all()
            everything = await registry.list_all(include_deleted=True)

        assert [t.key for t in live] == ["acme-co"]
        assert [t.key for t in everything] == ["acme-co", "globex"]
