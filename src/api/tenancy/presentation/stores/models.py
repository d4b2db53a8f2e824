"""Pydantic models for store API requests and responses."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from tenancy.application.services import StoreProvisioningRequest
from tenancy.domain.tenant import Tenant
from tenancy.domain.value_objects import BillingPlan, TenantStatus


class AdminUserRequest(BaseModel):
    """Administrator account created with the store."""

    username: str = Field(..., description="Login name", min_length=1, max_length=255)
    email: str = Field(..., description="E-mail address", min_length=3, max_length=255)
    first_name: str | None = Field(default=None, max_length=255)
    last_name: str | None = Field(default=None, max_length=255)
    password: str | None = Field(
        default=None, description="Initial password; omitted means none is set"
    )


class CreateStoreRequest(BaseModel):
    """Request model for onboarding a store."""

    key: str = Field(..., description="Store key", min_length=1, max_length=50)
    name: str = Field(..., description="Display name", min_length=1, max_length=255)
    subdomain: str = Field(..., description="Host label", min_length=1, max_length=63)
    billing_plan: BillingPlan = Field(default=BillingPlan.BASIC)
    admin: AdminUserRequest
    settings: dict[str, Any] = Field(
        default_factory=dict,
        description="Overrides merged onto the default store settings",
    )

    def to_provisioning_request(self) -> StoreProvisioningRequest:
        return StoreProvisioningRequest(
            key=self.key,
            name=self.name,
            subdomain=self.subdomain,
            admin_username=self.admin.username,
            admin_email=self.admin.email,
            admin_first_name=self.admin.first_name,
            admin_last_name=self.admin.last_name,
            admin_password=self.admin.password,
            billing_plan=self.billing_plan,
            settings=self.settings,
        )


class ChangeStatusRequest(BaseModel):
    """Request model for a lifecycle status change."""

    status: TenantStatus
    version: int = Field(..., description="Version last read by the caller", ge=0)


class StoreResponse(BaseModel):
    """Response model for a store."""

    id: str = Field(..., description="Store ID (ULID format)")
    key: str
    name: str
    subdomain: str
    schema_name: str
    status: TenantStatus
    billing_plan: BillingPlan
    settings: dict[str, Any]
    version: int
    deleted: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, tenant: Tenant) -> StoreResponse:
        """Convert domain Tenant to API response.

        Args:
            tenant: Tenant domain object

        Returns:
            StoreResponse
        """
        return cls(
            id=tenant.id.value,
            key=tenant.key,
            name=tenant.name,
            subdomain=tenant.subdomain,
            schema_name=tenant.schema_name,
            status=tenant.status,
            billing_plan=tenant.billing_plan,
            settings=tenant.settings,
            version=tenant.version,
            deleted=tenant.deleted,
            created_at=tenant.created_at,
            updated_at=tenant.updated_at,
        )
