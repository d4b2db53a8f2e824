"""Value objects for the Tenancy domain."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

from ulid import ULID

from tenancy.domain.exceptions import (
    InvalidStatusTransitionError,
    TenantValidationError,
)

TENANT_KEY_MAX_LENGTH = 50

_TENANT_KEY = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
_SUBDOMAIN = re.compile(r"^[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?$")
_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass(frozen=True)
class TenantId:
    """Identifier for a Tenant aggregate.

    Uses ULID for sortability and distribution-friendly generation.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> TenantId:
        """Generate a new TenantId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> TenantId:
        """Create TenantId from string value.

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid TenantId: {value}") from e

        return cls(value=value)


class TenantStatus(StrEnum):
    """Lifecycle status of a registered store."""

    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"
    FAILED = "FAILED"

    def can_transition_to(self, target: TenantStatus) -> bool:
        """Tell whether moving to ``target`` is an allowed transition."""
        return target in _ALLOWED_TRANSITIONS[self]

    def ensure_transition_to(self, target: TenantStatus) -> None:
        """Raise InvalidStatusTransitionError unless ``target`` is reachable."""
        if not self.can_transition_to(target):
            raise InvalidStatusTransitionError(current=self.value, target=target.value)


_ALLOWED_TRANSITIONS: dict[TenantStatus, frozenset[TenantStatus]] = {
    TenantStatus.PENDING: frozenset(
        {TenantStatus.ACTIVE, TenantStatus.FAILED, TenantStatus.SUSPENDED}
    ),
    TenantStatus.ACTIVE: frozenset({TenantStatus.INACTIVE, TenantStatus.SUSPENDED}),
    TenantStatus.INACTIVE: frozenset({TenantStatus.ACTIVE, TenantStatus.SUSPENDED}),
    TenantStatus.SUSPENDED: frozenset({TenantStatus.ACTIVE}),
    TenantStatus.FAILED: frozenset(),
}


class BillingPlan(StrEnum):
    """Commercial plan of a store."""

    BASIC = "BASIC"
    STANDARD = "STANDARD"
    PREMIUM = "PREMIUM"
    ENTERPRISE = "ENTERPRISE"


class ProvisioningStage(StrEnum):
    """Stage of a single store provisioning attempt."""

    VALIDATING = "VALIDATING"
    SCHEMA_CREATING = "SCHEMA_CREATING"
    IDENTITY_PROVISIONING = "IDENTITY_PROVISIONING"
    REGISTERING = "REGISTERING"
    CONFIGURING = "CONFIGURING"
    ACTIVE = "ACTIVE"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        """ACTIVE and FAILED end an attempt."""
        return self in (ProvisioningStage.ACTIVE, ProvisioningStage.FAILED)


def normalize_tenant_key(raw: str) -> str:
    """Lower-case and validate a store key.

    Keys are lowercase alphanumeric runs joined by single hyphens.

    Raises:
        TenantValidationError: If the key is empty, too long or malformed
    """
    key = (raw or "").strip().lower()
    if not key:
        raise TenantValidationError("Store key is required", field="key")
    if len(key) > TENANT_KEY_MAX_LENGTH:
        raise TenantValidationError(
            f"Store key must be at most {TENANT_KEY_MAX_LENGTH} characters",
            field="key",
        )
    if not _TENANT_KEY.match(key):
        raise TenantValidationError(
            "Store key may contain only lowercase letters, digits and "
            "single hyphens between them",
            field="key",
        )
    return key


def normalize_subdomain(raw: str) -> str:
    """Lower-case and validate a store subdomain (a single DNS label).

    Raises:
        TenantValidationError: If the subdomain is empty or not a DNS label
    """
    subdomain = (raw or "").strip().lower()
    if not subdomain:
        raise TenantValidationError("Subdomain is required", field="subdomain")
    if not _SUBDOMAIN.match(subdomain):
        raise TenantValidationError(
            "Subdomain must be a valid DNS label", field="subdomain"
        )
    return subdomain


def validate_email(raw: str, field: str = "admin_email") -> str:
    """Validate an e-mail address shape.

    Raises:
        TenantValidationError: If the address is empty or malformed
    """
    email = (raw or "").strip()
    if not email:
        raise TenantValidationError("Email is required", field=field)
    if not _EMAIL.match(email):
        raise TenantValidationError("Email is invalid", field=field)
    return email
