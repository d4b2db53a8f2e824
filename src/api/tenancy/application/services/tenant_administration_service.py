"""Store administration service for the Tenancy bounded context.

Reads stores and changes their lifecycle after provisioning. Every mutation
carries the version the caller last saw; a stale version fails with
ConcurrentModificationError and changes nothing.
"""

from __future__ import annotations

from tenancy.application.observability import (
    DefaultTenantAdministrationProbe,
    TenantAdministrationProbe,
)
from tenancy.domain.exceptions import TenantValidationError
from tenancy.domain.tenant import Tenant
from tenancy.domain.value_objects import TenantStatus, normalize_tenant_key
from tenancy.ports.exceptions import TenantNotFoundError
from tenancy.ports.repositories import RegistryScope
from tenancy.ports.schema import ISchemaManager


class TenantAdministrationService:
    """Application service for store lookup, status changes and decommissioning."""

    def __init__(
        self,
        registry_scope: RegistryScope,
        schema_manager: ISchemaManager,
        default_tenant_key: str,
        probe: TenantAdministrationProbe | None = None,
    ):
        """Initialize TenantAdministrationService with dependencies.

        Args:
            registry_scope: Opens one registry transaction per operation
            schema_manager: Drops schemas of decommissioned stores
            default_tenant_key: Key of the store that cannot be changed
            probe: Optional domain probe for observability
        """
        self._registry_scope = registry_scope
        self._schema_manager = schema_manager
        self._default_tenant_key = default_tenant_key
        self._probe = probe or DefaultTenantAdministrationProbe()

    async def get_store(self, key: str) -> Tenant:
        """Get a live store by key.

        Raises:
            TenantNotFoundError: If no live store has this key
        """
        async with self._registry_scope() as registry:
            tenant = await registry.find_by_key(key)
        if tenant is None:
            raise TenantNotFoundError(key)
        return tenant

    async def list_stores(self, include_deleted: bool = False) -> list[Tenant]:
        async with self._registry_scope() as registry:
            return await registry.list_all(include_deleted=include_deleted)

    async def change_status(
        self, key: str, status: TenantStatus, expected_version: int
    ) -> Tenant:
        """Move a store to a new lifecycle status.

        Args:
            key: Store key
            status: Target status
            expected_version: Version the caller last read

        Returns:
            The updated Tenant

        Raises:
            TenantValidationError: If the store is the default store or the
                transition is not allowed
            TenantNotFoundError: If no live store has this key
            ConcurrentModificationError: If ``expected_version`` is stale
        """
        key = self._guard_default(key, "change_status")
        async with self._registry_scope() as registry:
            current = await registry.find_by_key(key)
            if current is None:
                raise TenantNotFoundError(key)
            current.status.ensure_transition_to(status)
            updated = await registry.update_status(key, status, expected_version)

        self._probe.store_status_changed(
            tenant_key=key,
            previous=current.status.value,
            current=updated.status.value,
            version=updated.version,
        )
        return updated

    async def decommission(
        self, key: str, expected_version: int, drop_schema: bool = False
    ) -> Tenant:
        """Soft-delete a store and optionally drop its schema.

        The registry row is kept so the key, subdomain and schema name stay
        taken. The drop runs after the soft delete has committed, so a failed
        drop leaves a deleted store whose schema can be dropped later.

        Raises:
            TenantValidationError: If the store is the default store
            TenantNotFoundError: If no live store has this key
            ConcurrentModificationError: If ``expected_version`` is stale
            SchemaOperationError: If the schema drop fails
        """
        key = self._guard_default(key, "decommission")
        async with self._registry_scope() as registry:
            tenant = await registry.soft_delete(key, expected_version)

        if drop_schema:
            await self._schema_manager.drop_schema(tenant.schema_name)

        self._probe.store_decommissioned(
            tenant_key=key,
            schema_name=tenant.schema_name,
            schema_dropped=drop_schema,
        )
        return tenant

    def _guard_default(self, key: str, operation: str) -> str:
        normalized = normalize_tenant_key(key)
        if normalized == self._default_tenant_key:
            self._probe.default_store_protected(normalized, operation)
            raise TenantValidationError(
                "The default store cannot be changed", field="key"
            )
        return normalized
