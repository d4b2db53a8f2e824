"""Observability for shared middleware operations."""

from shared_kernel.middleware.observability.tenant_context_probe import (
    DefaultTenantResolutionProbe,
    TenantResolutionProbe,
)

__all__ = [
    "DefaultTenantResolutionProbe",
    "TenantResolutionProbe",
]
