"""Per-request tenant resolution and schema-routed sessions.

The resolver and its strategy chain are built once from TenancySettings.
The resolution context is produced once per request, cached by FastAPI's
per-request dependency cache, and never kept across requests.
"""

from __future__ import annotations

import threading
from typing import Annotated, AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_write_sessionmaker
from infrastructure.settings import TenancySettings, get_tenancy_settings
from shared_kernel.middleware.tenant_context import TenantResolutionContext
from tenancy.application.tenant_resolver import (
    TenantResolver,
    TenantSignals,
    build_strategies,
)
from tenancy.dependencies.registry import get_read_registry_scope
from tenancy.infrastructure.connection_router import TenantConnectionRouter

# Module-level resolver instance (created on first use)
_resolver: TenantResolver | None = None
_resolver_lock = threading.Lock()


def build_tenant_resolver(settings: TenancySettings) -> TenantResolver:
    """Build a resolver whose strategy chain follows configuration.

    Raises:
        ValueError: If a configured strategy name is unknown
    """
    return TenantResolver(
        registry_scope=get_read_registry_scope(),
        strategies=build_strategies(
            settings.resolution_strategies, settings.reserved_subdomains
        ),
        default_tenant_key=settings.default_tenant_key,
        default_schema_name=settings.default_schema_name,
    )


def get_tenant_resolver() -> TenantResolver:
    """Get the tenant resolver (singleton)."""
    global _resolver
    if _resolver is None:
        with _resolver_lock:
            if _resolver is None:
                _resolver = build_tenant_resolver(get_tenancy_settings())
    return _resolver


def reset_tenant_resolver() -> None:
    """Forget the resolver; called after the engines are disposed."""
    global _resolver
    _resolver = None


async def get_tenant_resolution_context(
    request: Request,
    resolver: Annotated[TenantResolver, Depends(get_tenant_resolver)],
    settings: Annotated[TenancySettings, Depends(get_tenancy_settings)],
) -> TenantResolutionContext:
    """Resolve the store for the current request.

    Never fails: requests without a usable signal get the default store.
    """
    signals = TenantSignals(
        tenant_key=request.headers.get(settings.tenant_header),
        host=request.headers.get("host"),
    )
    return await resolver.resolve(signals)


def get_connection_router() -> TenantConnectionRouter:
    return TenantConnectionRouter(get_write_sessionmaker())


async def get_tenant_session(
    context: Annotated[
        TenantResolutionContext, Depends(get_tenant_resolution_context)
    ],
    router: Annotated[TenantConnectionRouter, Depends(get_connection_router)],
) -> AsyncGenerator[AsyncSession, None]:
    """Provide a session whose transactions run in the resolved store schema.

    Callers manage transactions with ``async with session.begin()``.
    """
    async with router.session(context) as session:
        yield session
