"""Domain layer for the Tenancy bounded context."""

from tenancy.domain.exceptions import (
    InvalidSchemaNameError,
    InvalidStatusTransitionError,
    TenancyError,
    TenantValidationError,
)
from tenancy.domain.provisioning import ProvisioningAttempt
from tenancy.domain.schema_name import derive_schema_name, validate_schema_name
from tenancy.domain.tenant import Tenant
from tenancy.domain.value_objects import (
    BillingPlan,
    ProvisioningStage,
    TenantId,
    TenantStatus,
)

__all__ = [
    "BillingPlan",
    "InvalidSchemaNameError",
    "InvalidStatusTransitionError",
    "ProvisioningAttempt",
    "ProvisioningStage",
    "TenancyError",
    "Tenant",
    "TenantId",
    "TenantStatus",
    "TenantValidationError",
    "derive_schema_name",
    "validate_schema_name",
]
