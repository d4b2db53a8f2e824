"""Application services for the Tenancy bounded context."""

from tenancy.application.services.schema_migration_service import (
    SchemaMigrationOutcome,
    SchemaMigrationService,
)
from tenancy.application.services.store_provisioning_service import (
    StoreProvisioningRequest,
    StoreProvisioningService,
)
from tenancy.application.services.tenant_administration_service import (
    TenantAdministrationService,
)
from tenancy.application.services.tenant_bootstrap_service import (
    TenantBootstrapService,
)

__all__ = [
    "SchemaMigrationOutcome",
    "SchemaMigrationService",
    "StoreProvisioningRequest",
    "StoreProvisioningService",
    "TenantAdministrationService",
    "TenantBootstrapService",
]
