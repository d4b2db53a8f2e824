"""Store onboarding and administration endpoints."""

from tenancy.presentation.stores.routes import router

__all__ = ["router"]
