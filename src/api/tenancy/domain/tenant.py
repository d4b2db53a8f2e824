"""Tenant aggregate for the Tenancy context."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from tenancy.domain.value_objects import BillingPlan, TenantId, TenantStatus


@dataclass
class Tenant:
    """A store registered on the platform.

    Business rules:
    - ``key``, ``subdomain`` and ``schema_name`` are unique across every
      tenant ever registered, soft-deleted ones included
    - ``schema_name`` is bound to this tenant for good and never reused
    - ``version`` increases by one on every persisted mutation
    """

    id: TenantId
    key: str
    name: str
    subdomain: str
    schema_name: str
    status: TenantStatus = TenantStatus.PENDING
    billing_plan: BillingPlan = BillingPlan.BASIC
    settings: dict[str, Any] = field(default_factory=dict)
    identity_client_id: str | None = None
    admin_user_id: str | None = None
    version: int = 0
    deleted: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def register(
        cls,
        key: str,
        name: str,
        subdomain: str,
        schema_name: str,
        billing_plan: BillingPlan = BillingPlan.BASIC,
        identity_client_id: str | None = None,
        admin_user_id: str | None = None,
        status: TenantStatus = TenantStatus.PENDING,
    ) -> Tenant:
        """Factory method for a tenant that is about to be inserted.

        Args:
            key: Normalized store key
            name: Display name
            subdomain: Normalized subdomain
            schema_name: Schema derived from the key
            billing_plan: Commercial plan
            identity_client_id: Identity-provider client id, if provisioned
            admin_user_id: Identity-provider admin user id, if provisioned
            status: Initial status

        Returns:
            A new Tenant with a fresh id and version 0
        """
        return cls(
            id=TenantId.generate(),
            key=key,
            name=name,
            subdomain=subdomain,
            schema_name=schema_name,
            status=status,
            billing_plan=billing_plan,
            identity_client_id=identity_client_id,
            admin_user_id=admin_user_id,
        )
