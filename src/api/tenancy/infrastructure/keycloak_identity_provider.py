"""Keycloak admin REST adapter for IIdentityProvider.

Each call fetches a short-lived admin token first. Provisioning is rare,
so tokens are not cached.
"""

from __future__ import annotations

from typing import Any

import httpx

from infrastructure.settings import KeycloakSettings
from tenancy.infrastructure.observability import (
    DefaultIdentityProviderProbe,
    IdentityProviderProbe,
)
from tenancy.ports.exceptions import IdentityProvisioningError
from tenancy.ports.identity import (
    AdminUserRegistration,
    ClientRegistration,
    IIdentityProvider,
)


class KeycloakIdentityProvider(IIdentityProvider):
    """Creates store clients and admin users through the Keycloak admin API."""

    def __init__(
        self,
        settings: KeycloakSettings,
        client: httpx.AsyncClient | None = None,
        probe: IdentityProviderProbe | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            settings: Keycloak connection settings
            client: Optional preconfigured HTTP client (tests pass a mock transport)
            probe: Optional domain probe for observability
        """
        self._settings = settings
        self._client = client or httpx.AsyncClient(
            base_url=settings.url.rstrip("/"),
            timeout=settings.timeout_seconds,
        )
        self._probe = probe or DefaultIdentityProviderProbe()

    @property
    def _realm_path(self) -> str:
        return f"/admin/realms/{self._settings.realm}"

    async def create_client(self, registration: ClientRegistration) -> str:
        """Create a confidential OpenID Connect client.

        Returns:
            Keycloak's internal id of the client
        """
        payload = {
            "clientId": registration.client_id,
            "name": registration.name,
            "enabled": True,
            "protocol": "openid-connect",
            "publicClient": False,
            "standardFlowEnabled": True,
            "directAccessGrantsEnabled": True,
            "redirectUris": list(registration.redirect_uris),
            "webOrigins": list(registration.web_origins),
        }
        response = await self._admin_request(
            "create_client", "POST", f"{self._realm_path}/clients", json=payload
        )
        internal_id = self._created_id("create_client", response)
        self._probe.client_created(registration.client_id, internal_id)
        return internal_id

    async def create_user(self, registration: AdminUserRegistration) -> str:
        """Create an enabled user, with a permanent password when one is given.

        Returns:
            Keycloak's id of the user
        """
        payload: dict[str, Any] = {
            "username": registration.username,
            "email": registration.email,
            "firstName": registration.first_name,
            "lastName": registration.last_name,
            "enabled": True,
            "emailVerified": False,
        }
        if registration.password:
            payload["credentials"] = [
                {
                    "type": "password",
                    "value": registration.password,
                    "temporary": False,
                }
            ]
        response = await self._admin_request(
            "create_user", "POST", f"{self._realm_path}/users", json=payload
        )
        user_id = self._created_id("create_user", response)
        self._probe.user_created(registration.username, user_id)
        return user_id

    async def assign_role(self, user_id: str, role_name: str) -> None:
        """Grant a realm role to a user."""
        role = await self._admin_request(
            "assign_role", "GET", f"{self._realm_path}/roles/{role_name}"
        )
        await self._admin_request(
            "assign_role",
            "POST",
            f"{self._realm_path}/users/{user_id}/role-mappings/realm",
            json=[role.json()],
        )
        self._probe.role_assigned(user_id, role_name)

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def _admin_token(self, operation: str) -> str:
        settings = self._settings
        response = await self._send(
            operation,
            "POST",
            f"/realms/{settings.admin_realm}/protocol/openid-connect/token",
            data={
                "grant_type": "password",
                "client_id": settings.admin_client_id,
                "username": settings.admin_username,
                "password": settings.admin_password.get_secret_value(),
            },
        )
        return response.json()["access_token"]

    async def _admin_request(
        self, operation: str, method: str, path: str, **kwargs: Any
    ) -> httpx.Response:
        token = await self._admin_token(operation)
        return await self._send(
            operation,
            method,
            path,
            headers={"Authorization": f"Bearer {token}"},
            **kwargs,
        )

    async def _send(
        self, operation: str, method: str, path: str, **kwargs: Any
    ) -> httpx.Response:
        """Send one request, raising IdentityProvisioningError on any failure."""
        try:
            response = await self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            self._probe.request_failed(operation, status_code, e.response.text)
            message = (
                "resource already exists"
                if status_code == httpx.codes.CONFLICT
                else f"HTTP {status_code}"
            )
            raise IdentityProvisioningError(
                operation, message, status_code=status_code
            ) from e
        except httpx.HTTPError as e:
            self._probe.request_failed(operation, None, str(e))
            raise IdentityProvisioningError(operation, str(e)) from e
        return response

    def _created_id(self, operation: str, response: httpx.Response) -> str:
        """Keycloak answers 201 with the new resource URL in Location."""
        location = response.headers.get("Location", "")
        created_id = location.rstrip("/").rsplit("/", 1)[-1]
        if not created_id:
            self._probe.request_failed(operation, response.status_code, "no Location")
            raise IdentityProvisioningError(
                operation,
                "response did not include the created resource location",
                status_code=response.status_code,
            )
        return created_id
