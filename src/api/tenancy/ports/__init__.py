"""Ports (interfaces) for the Tenancy bounded context.

Ports define the contracts for the registry, the schema lifecycle manager
and the identity provider without specifying implementation details.
"""

from tenancy.ports.exceptions import (
    ConcurrentModificationError,
    DuplicateTenantError,
    IdentityProvisioningError,
    SchemaOperationError,
    TenantNotFoundError,
)
from tenancy.ports.identity import (
    AdminUserRegistration,
    ClientRegistration,
    IIdentityProvider,
)
from tenancy.ports.repositories import ITenantRegistry, RegistryScope
from tenancy.ports.schema import ISchemaManager, MigrationRecord

__all__ = [
    "AdminUserRegistration",
    "ClientRegistration",
    "ConcurrentModificationError",
    "DuplicateTenantError",
    "IIdentityProvider",
    "ISchemaManager",
    "ITenantRegistry",
    "IdentityProvisioningError",
    "MigrationRecord",
    "RegistryScope",
    "SchemaOperationError",
    "TenantNotFoundError",
]
