"""Domain-Oriented Observability for Tenancy infrastructure."""

from tenancy.infrastructure.observability.connection_router_probe import (
    ConnectionRouterProbe,
    DefaultConnectionRouterProbe,
)
from tenancy.infrastructure.observability.identity_provider_probe import (
    DefaultIdentityProviderProbe,
    IdentityProviderProbe,
)
from tenancy.infrastructure.observability.registry_probe import (
    DefaultTenantRegistryProbe,
    TenantRegistryProbe,
)
from tenancy.infrastructure.observability.schema_lifecycle_probe import (
    DefaultSchemaLifecycleProbe,
    SchemaLifecycleProbe,
)

__all__ = [
    "ConnectionRouterProbe",
    "DefaultConnectionRouterProbe",
    "DefaultIdentityProviderProbe",
    "DefaultSchemaLifecycleProbe",
    "DefaultTenantRegistryProbe",
    "IdentityProviderProbe",
    "SchemaLifecycleProbe",
    "TenantRegistryProbe",
]
