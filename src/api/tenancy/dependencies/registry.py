"""Registry dependencies.

Request-path lookups use the read pool; onboarding and administration use
the write pool, so resolution never queues behind provisioning DDL.
"""

from infrastructure.database.dependencies import (
    get_read_sessionmaker,
    get_write_sessionmaker,
)
from tenancy.infrastructure.observability import (
    DefaultTenantRegistryProbe,
    TenantRegistryProbe,
)
from tenancy.infrastructure.tenant_registry import registry_scope_factory
from tenancy.ports.repositories import RegistryScope


def get_tenant_registry_probe() -> TenantRegistryProbe:
    """Get TenantRegistryProbe instance.

    Returns:
        DefaultTenantRegistryProbe instance for observability
    """
    return DefaultTenantRegistryProbe()


def get_write_registry_scope() -> RegistryScope:
    """Registry scopes that commit to the write pool."""
    return registry_scope_factory(
        get_write_sessionmaker(), probe=get_tenant_registry_probe()
    )


def get_read_registry_scope() -> RegistryScope:
    """Registry scopes for lookups on the read pool."""
    return registry_scope_factory(
        get_read_sessionmaker(), probe=get_tenant_registry_probe()
    )
