"""SQLAlchemy ORM models for the Tenancy bounded context."""

from tenancy.infrastructure.models.tenant import TenantModel

__all__ = [
    "TenantModel",
]
