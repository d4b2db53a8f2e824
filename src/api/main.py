"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from infrastructure.database.dependencies import close_database_connections
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultStartupProbe
from infrastructure.settings import get_settings, get_tenancy_settings
from infrastructure.version import __version__
from tenancy.dependencies.identity import close_identity_provider
from tenancy.dependencies.resolution import get_tenant_resolver, reset_tenant_resolver
from tenancy.dependencies.schema import reset_schema_manager
from tenancy.dependencies.services import get_tenant_bootstrap_service
from tenancy.presentation import router as tenancy_router


@asynccontextmanager
async def gocommerce_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - Resolution strategy chain (built once from settings)
    - Default store bootstrap (schema and registry row)
    - Engine and identity-provider client cleanup on shutdown
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    probe = DefaultStartupProbe()

    resolver = get_tenant_resolver()
    probe.resolution_strategies_configured(resolver.strategy_names)

    try:
        if get_tenancy_settings().bootstrap_default_tenant:
            await get_tenant_bootstrap_service().ensure_default_tenant()
        else:
            probe.default_tenant_bootstrap_disabled()

        yield
    finally:
        await close_identity_provider()
        await close_database_connections()
        reset_tenant_resolver()
        reset_schema_manager()


app = FastAPI(
    title="GoCommerce API",
    description="Schema-per-tenant core of the GoCommerce commerce platform",
    version=__version__,
    lifespan=gocommerce_lifespan,
)

app.include_router(tenancy_router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}
