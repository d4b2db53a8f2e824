"""Default store bootstrap for the Tenancy bounded context.

Ensures the fallback store exists at application startup: its schema is
created and migrated, and its registry row is present. Safe to run from
several application instances at once.
"""

from __future__ import annotations

from infrastructure.observability.startup_probe import (
    DefaultStartupProbe,
    StartupProbe,
)
from infrastructure.settings import TenancySettings
from tenancy.domain.tenant import Tenant
from tenancy.domain.value_objects import TenantStatus
from tenancy.ports.exceptions import DuplicateTenantError
from tenancy.ports.repositories import RegistryScope
from tenancy.ports.schema import ISchemaManager


class TenantBootstrapService:
    """Bootstrap service for the default store.

    Unlike StoreProvisioningService, this service:
    - Does not call the identity provider
    - Registers the store directly as ACTIVE
    - Uses StartupProbe instead of StoreProvisioningProbe
    """

    def __init__(
        self,
        registry_scope: RegistryScope,
        schema_manager: ISchemaManager,
        settings: TenancySettings,
        probe: StartupProbe | None = None,
    ):
        """Initialize TenantBootstrapService with dependencies.

        Args:
            registry_scope: Opens one registry transaction per step
            schema_manager: Creates and migrates the default schema
            settings: Tenancy settings naming the default store
            probe: Optional startup probe for observability
        """
        self._registry_scope = registry_scope
        self._schema_manager = schema_manager
        self._settings = settings
        self._probe = probe or DefaultStartupProbe()

    async def ensure_default_tenant(self) -> Tenant:
        """Ensure the default store's schema and registry row exist.

        Returns:
            The default Tenant (either newly created or existing)

        Raises:
            SchemaOperationError: If the default schema cannot be migrated
            RuntimeError: If the store can neither be created nor read back
        """
        key = self._settings.default_tenant_key
        await self._schema_manager.create_schema(self._settings.default_schema_name)

        async with self._registry_scope() as registry:
            tenant = await registry.find_by_key(key)

        if tenant is not None:
            self._probe.default_tenant_already_exists(
                tenant_key=tenant.key,
                schema_name=tenant.schema_name,
            )
            return tenant

        tenant = await self._create_with_race_handling()
        if tenant is None:
            raise RuntimeError("Failed to create or retrieve default tenant")
        return tenant

    async def _create_with_race_handling(self) -> Tenant | None:
        """Insert the default store, re-reading if another instance won.

        Returns:
            The created or concurrently-created Tenant, or None if unrecoverable
        """
        tenant = Tenant.register(
            key=self._settings.default_tenant_key,
            name=self._settings.default_tenant_name,
            subdomain=self._settings.default_tenant_key,
            schema_name=self._settings.default_schema_name,
            status=TenantStatus.ACTIVE,
        )
        try:
            async with self._registry_scope() as registry:
                created = await registry.insert(tenant)
        except DuplicateTenantError:
            async with self._registry_scope() as registry:
                concurrent = await registry.find_by_key(tenant.key)
            if concurrent is not None:
                self._probe.default_tenant_already_exists(
                    tenant_key=concurrent.key,
                    schema_name=concurrent.schema_name,
                )
            return concurrent

        self._probe.default_tenant_bootstrapped(
            tenant_key=created.key,
            schema_name=created.schema_name,
        )
        return created
