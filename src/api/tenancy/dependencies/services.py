"""Application service dependencies for the Tenancy bounded context."""

from typing import Annotated

from fastapi import Depends

from infrastructure.settings import TenancySettings, get_tenancy_settings
from tenancy.application.observability import (
    DefaultSchemaMigrationProbe,
    DefaultStoreProvisioningProbe,
    DefaultTenantAdministrationProbe,
    SchemaMigrationProbe,
    StoreProvisioningProbe,
    TenantAdministrationProbe,
)
from tenancy.application.services import (
    SchemaMigrationService,
    StoreProvisioningService,
    TenantAdministrationService,
    TenantBootstrapService,
)
from tenancy.dependencies.identity import get_identity_provider
from tenancy.dependencies.registry import get_write_registry_scope
from tenancy.dependencies.schema import get_schema_manager
from tenancy.ports.identity import IIdentityProvider
from tenancy.ports.repositories import RegistryScope
from tenancy.ports.schema import ISchemaManager


def get_store_provisioning_probe() -> StoreProvisioningProbe:
    """Get StoreProvisioningProbe instance.

    Returns:
        DefaultStoreProvisioningProbe instance for observability
    """
    return DefaultStoreProvisioningProbe()


def get_tenant_administration_probe() -> TenantAdministrationProbe:
    """Get TenantAdministrationProbe instance.

    Returns:
        DefaultTenantAdministrationProbe instance for observability
    """
    return DefaultTenantAdministrationProbe()


def get_schema_migration_probe() -> SchemaMigrationProbe:
    return DefaultSchemaMigrationProbe()


def get_store_provisioning_service(
    registry_scope: Annotated[RegistryScope, Depends(get_write_registry_scope)],
    schema_manager: Annotated[ISchemaManager, Depends(get_schema_manager)],
    identity_provider: Annotated[IIdentityProvider, Depends(get_identity_provider)],
    settings: Annotated[TenancySettings, Depends(get_tenancy_settings)],
    probe: Annotated[StoreProvisioningProbe, Depends(get_store_provisioning_probe)],
) -> StoreProvisioningService:
    """Get StoreProvisioningService instance.

    Args:
        registry_scope: Registry transactions on the write pool
        schema_manager: Store schema lifecycle manager
        identity_provider: Identity provider adapter
        settings: Tenancy settings
        probe: Store provisioning probe for observability

    Returns:
        StoreProvisioningService instance
    """
    return StoreProvisioningService(
        registry_scope=registry_scope,
        schema_manager=schema_manager,
        identity_provider=identity_provider,
        settings=settings,
        probe=probe,
    )


def get_tenant_administration_service(
    registry_scope: Annotated[RegistryScope, Depends(get_write_registry_scope)],
    schema_manager: Annotated[ISchemaManager, Depends(get_schema_manager)],
    settings: Annotated[TenancySettings, Depends(get_tenancy_settings)],
    probe: Annotated[
        TenantAdministrationProbe, Depends(get_tenant_administration_probe)
    ],
) -> TenantAdministrationService:
    """Get TenantAdministrationService instance."""
    return TenantAdministrationService(
        registry_scope=registry_scope,
        schema_manager=schema_manager,
        default_tenant_key=settings.default_tenant_key,
        probe=probe,
    )


def get_tenant_bootstrap_service() -> TenantBootstrapService:
    """Build the bootstrap service outside a request (application startup)."""
    return TenantBootstrapService(
        registry_scope=get_write_registry_scope(),
        schema_manager=get_schema_manager(),
        settings=get_tenancy_settings(),
    )


def get_schema_migration_service() -> SchemaMigrationService:
    """Build the bulk migration service outside a request."""
    settings = get_tenancy_settings()
    return SchemaMigrationService(
        registry_scope=get_write_registry_scope(),
        schema_manager=get_schema_manager(),
        default_tenant_key=settings.default_tenant_key,
        default_schema_name=settings.default_schema_name,
        concurrency=settings.migration_concurrency,
        probe=get_schema_migration_probe(),
    )
