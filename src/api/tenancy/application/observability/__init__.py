"""Domain-Oriented Observability for Tenancy application services."""

from tenancy.application.observability.schema_migration_probe import (
    DefaultSchemaMigrationProbe,
    SchemaMigrationProbe,
)
from tenancy.application.observability.store_provisioning_probe import (
    DefaultStoreProvisioningProbe,
    StoreProvisioningProbe,
)
from tenancy.application.observability.tenant_administration_probe import (
    DefaultTenantAdministrationProbe,
    TenantAdministrationProbe,
)

__all__ = [
    "DefaultSchemaMigrationProbe",
    "DefaultStoreProvisioningProbe",
    "DefaultTenantAdministrationProbe",
    "SchemaMigrationProbe",
    "StoreProvisioningProbe",
    "TenantAdministrationProbe",
]
