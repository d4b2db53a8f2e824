"""Brings every store schema up to the latest migration revision."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from tenancy.application.observability import (
    DefaultSchemaMigrationProbe,
    SchemaMigrationProbe,
)
from tenancy.ports.repositories import RegistryScope
from tenancy.ports.schema import ISchemaManager


@dataclass(frozen=True)
class SchemaMigrationOutcome:
    """Result of migrating one store schema."""

    schema_name: str
    tenant_key: str
    applied: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


class SchemaMigrationService:
    """Migrates the default schema and every registered store schema.

    Schemas migrate concurrently up to a configured limit. A failure in one
    schema is reported and does not stop the others.
    """

    def __init__(
        self,
        registry_scope: RegistryScope,
        schema_manager: ISchemaManager,
        default_tenant_key: str,
        default_schema_name: str,
        concurrency: int = 4,
        probe: SchemaMigrationProbe | None = None,
    ):
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self._registry_scope = registry_scope
        self._schema_manager = schema_manager
        self._default_tenant_key = default_tenant_key
        self._default_schema_name = default_schema_name
        self._concurrency = concurrency
        self._probe = probe or DefaultSchemaMigrationProbe()

    async def migrate_all(self) -> list[SchemaMigrationOutcome]:
        """Migrate every schema once.

        Soft-deleted stores are skipped; their schemas may already be gone.

        Returns:
            One outcome per schema, the default schema first
        """
        async with self._registry_scope() as registry:
            tenants = await registry.list_all()

        targets: dict[str, str] = {self._default_schema_name: self._default_tenant_key}
        for tenant in tenants:
            targets.setdefault(tenant.schema_name, tenant.key)

        self._probe.bulk_migration_started(len(targets), self._concurrency)
        semaphore = asyncio.Semaphore(self._concurrency)

        async def migrate_one(
            schema_name: str, tenant_key: str
        ) -> SchemaMigrationOutcome:
            async with semaphore:
                try:
                    applied = await self._schema_manager.migrate(schema_name)
                except Exception as e:
                    self._probe.schema_migration_failed(schema_name, tenant_key, str(e))
                    return SchemaMigrationOutcome(
                        schema_name=schema_name, tenant_key=tenant_key, error=str(e)
                    )
            self._probe.schema_migrated(schema_name, tenant_key, applied)
            return SchemaMigrationOutcome(
                schema_name=schema_name, tenant_key=tenant_key, applied=applied
            )

        outcomes = await asyncio.gather(
            *(migrate_one(schema, key) for schema, key in targets.items())
        )
        self._probe.bulk_migration_completed(
            len(outcomes), sum(1 for outcome in outcomes if not outcome.succeeded)
        )
        return list(outcomes)
