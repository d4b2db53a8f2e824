"""Shared middleware for cross-cutting concerns.

Holds the per-request tenant resolution context that the tenancy context
produces and that every store-scoped bounded context consumes.
"""

from shared_kernel.middleware.tenant_context import (
    ResolutionDegraded,
    ResolutionSource,
    TenantResolutionContext,
)

__all__ = [
    "ResolutionDegraded",
    "ResolutionSource",
    "TenantResolutionContext",
]
