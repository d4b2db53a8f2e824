"""Domain exceptions for the Tenancy bounded context.

These represent violations of tenancy business rules. They are raised by
domain objects and application services and never retried automatically.
"""

from __future__ import annotations


class TenancyError(Exception):
    """Base class for every tenancy error."""

    pass


class TenantValidationError(TenancyError):
    """Raised when store input fails a format or business rule.

    Validation failures happen before any side effect, so nothing needs
    cleaning up.
    """

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class InvalidSchemaNameError(TenantValidationError):
    """Raised when a schema name is not a safe PostgreSQL identifier."""

    def __init__(self, schema_name: str):
        super().__init__(
            f"'{schema_name}' is not a safe schema identifier",
            field="schema_name",
        )
        self.schema_name = schema_name


class InvalidStatusTransitionError(TenantValidationError):
    """Raised when a tenant status change is not an allowed transition."""

    def __init__(self, current: str, target: str):
        super().__init__(
            f"Cannot transition tenant from {current} to {target}",
            field="status",
        )
        self.current = current
        self.target = target
