"""Resolved tenant context endpoint."""

from tenancy.presentation.tenant.routes import router

__all__ = ["router"]
