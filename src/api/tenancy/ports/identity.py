"""Identity provider port for store provisioning."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class ClientRegistration:
    """Confidential client to create for a store."""

    client_id: str
    name: str
    redirect_uris: list[str] = field(default_factory=list)
    web_origins: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class AdminUserRegistration:
    """Store administrator account to create."""

    username: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    password: str | None = None


@runtime_checkable
class IIdentityProvider(Protocol):
    """The three identity-provider calls store provisioning needs."""

    async def create_client(self, registration: ClientRegistration) -> str:
        """Create a confidential client.

        Returns:
            The provider's internal id of the client

        Raises:
            IdentityProvisioningError: If the provider rejects the request
        """
        ...

    async def create_user(self, registration: AdminUserRegistration) -> str:
        """Create a user account.

        Returns:
            The provider's id of the user

        Raises:
            IdentityProvisioningError: If the provider rejects the request
        """
        ...

    async def assign_role(self, user_id: str, role_name: str) -> None:
        """Grant a realm role to a user.

        Raises:
            IdentityProvisioningError: If the role is unknown or the grant fails
        """
        ...
