"""Port-level exceptions for the Tenancy bounded context.

These exceptions describe failures reported by the registry, the schema
lifecycle manager and the identity provider. They should be caught and
handled by the application layer.
"""

from __future__ import annotations

from tenancy.domain.exceptions import TenancyError


class DuplicateTenantError(TenancyError):
    """Raised when a store key or subdomain is already taken.

    The uniqueness constraint spans soft-deleted tenants, so a name that was
    ever registered stays taken. Never retried automatically.
    """

    def __init__(self, field: str, value: str):
        super().__init__(f"A store with {field} '{value}' already exists")
        self.field = field
        self.value = value


class TenantNotFoundError(TenancyError):
    """Raised when a store key names no live registry row."""

    def __init__(self, key: str):
        super().__init__(f"Store '{key}' not found")
        self.key = key


class ConcurrentModificationError(TenancyError):
    """Raised when an update carried a stale registry version.

    The stored row is left unchanged. Callers re-read and decide whether to
    reapply their change.
    """

    def __init__(self, key: str, expected_version: int, actual_version: int):
        super().__init__(
            f"Store '{key}' was modified concurrently: expected version "
            f"{expected_version}, found {actual_version}"
        )
        self.key = key
        self.expected_version = expected_version
        self.actual_version = actual_version


class SchemaOperationError(TenancyError):
    """Raised when creating, migrating or dropping a store schema fails.

    Connectivity failures are not wrapped; they propagate as raised by the
    driver. ``version`` names the migration revision that failed, when the
    failure happened while applying one.
    """

    def __init__(
        self,
        schema_name: str,
        operation: str,
        version: str | None = None,
        message: str | None = None,
    ):
        detail = f"Schema {operation} failed for '{schema_name}'"
        if version is not None:
            detail += f" at revision {version}"
        if message:
            detail += f": {message}"
        super().__init__(detail)
        self.schema_name = schema_name
        self.operation = operation
        self.version = version


class IdentityProvisioningError(TenancyError):
    """Raised when the identity provider rejects or fails a request."""

    def __init__(
        self,
        operation: str,
        message: str,
        status_code: int | None = None,
    ):
        super().__init__(f"Identity provider {operation} failed: {message}")
        self.operation = operation
        self.status_code = status_code
