"""Identity provider dependency."""

from __future__ import annotations

import threading

from infrastructure.settings import get_keycloak_settings
from tenancy.infrastructure.keycloak_identity_provider import (
    KeycloakIdentityProvider,
)

# Module-level provider instance, owns one pooled HTTP client
_identity_provider: KeycloakIdentityProvider | None = None
_identity_provider_lock = threading.Lock()


def get_identity_provider() -> KeycloakIdentityProvider:
    """Get the Keycloak identity provider (singleton)."""
    global _identity_provider
    if _identity_provider is None:
        with _identity_provider_lock:
            if _identity_provider is None:
                _identity_provider = KeycloakIdentityProvider(
                    settings=get_keycloak_settings()
                )
    return _identity_provider


async def close_identity_provider() -> None:
    """Close the provider's HTTP client on application shutdown."""
    global _identity_provider
    if _identity_provider is not None:
        await _identity_provider.aclose()
        _identity_provider = None
