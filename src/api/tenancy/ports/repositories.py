"""Repository ports for the Tenancy bounded context."""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Any, Callable, Protocol, runtime_checkable

from tenancy.domain.tenant import Tenant
from tenancy.domain.value_objects import TenantStatus


@runtime_checkable
class ITenantRegistry(Protocol):
    """Durable catalog of stores.

    Lookups normalize case. ``find_*`` hide soft-deleted stores unless asked;
    ``exists_*`` never do, because their names stay reserved for good.
    Mutations are optimistic: they apply only when ``expected_version``
    matches the stored version, and bump it by one.
    """

    async def find_by_key(
        self, key: str, include_deleted: bool = False
    ) -> Tenant | None:
        """Fetch a store by key, or None."""
        ...

    async def find_by_subdomain(
        self, subdomain: str, include_deleted: bool = False
    ) -> Tenant | None:
        """Fetch a store by subdomain, or None."""
        ...

    async def exists_by_key(self, key: str) -> bool:
        """Tell whether a key was ever registered.

        A negative answer does not guarantee a later insert succeeds.
        """
        ...

    async def exists_by_subdomain(self, subdomain: str) -> bool:
        """Tell whether a subdomain was ever registered."""
        ...

    async def insert(self, tenant: Tenant) -> Tenant:
        """Insert a new store.

        Raises:
            DuplicateTenantError: If the key, subdomain or schema name is taken
        """
        ...

    async def update_status(
        self, key: str, status: TenantStatus, expected_version: int
    ) -> Tenant:
        """Set the status of a live store.

        Raises:
            TenantNotFoundError: If no live store has this key
            ConcurrentModificationError: If ``expected_version`` is stale
        """
        ...

    async def update_settings(
        self, key: str, settings: dict[str, Any], expected_version: int
    ) -> Tenant:
        """Replace the settings blob of a live store.

        Raises:
            TenantNotFoundError: If no live store has this key
            ConcurrentModificationError: If ``expected_version`` is stale
        """
        ...

    async def soft_delete(self, key: str, expected_version: int) -> Tenant:
        """Mark a live store deleted, keeping its names reserved.

        Raises:
            TenantNotFoundError: If no live store has this key
            ConcurrentModificationError: If ``expected_version`` is stale
        """
        ...

    async def list_all(self, include_deleted: bool = False) -> list[Tenant]:
        """List stores ordered by key."""
        ...


# Opens one session and one transaction and yields a registry bound to it.
# The transaction commits when the block exits cleanly.
RegistryScope = Callable[[], AbstractAsyncContextManager[ITenantRegistry]]
