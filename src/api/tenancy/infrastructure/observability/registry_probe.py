"""Domain probe for tenant registry operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class TenantRegistryProbe(Protocol):
    """Domain probe for tenant registry persistence."""

    def tenant_inserted(self, key: str, schema_name: str) -> None:
        """Record that a store row was inserted."""
        ...

    def duplicate_tenant(self, field: str, value: str) -> None:
        """Record that an insert hit a uniqueness constraint."""
        ...

    def tenant_retrieved(self, key: str) -> None:
        """Record that a store row was read."""
        ...

    def tenant_updated(self, key: str, version: int, change: str) -> None:
        """Record that a store row was mutated."""
        ...

    def concurrent_modification(
        self, key: str, expected_version: int, actual_version: int
    ) -> None:
        """Record that an update lost an optimistic-concurrency race."""
        ...

    def tenants_listed(self, count: int) -> None:
        """Record that the registry was listed."""
        ...

    def with_context(self, context: ObservationContext) -> TenantRegistryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantRegistryProbe:
    """Default implementation of TenantRegistryProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultTenantRegistryProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantRegistryProbe(logger=self._logger, context=context)

    def tenant_inserted(self, key: str, schema_name: str) -> None:
        self._logger.info(
            "tenant_inserted",
            tenant_key=key,
            schema_name=schema_name,
            **self._get_context_kwargs(),
        )

    def duplicate_tenant(self, field: str, value: str) -> None:
        self._logger.warning(
            "duplicate_tenant",
            field=field,
            value=value,
            **self._get_context_kwargs(),
        )

    def tenant_retrieved(self, key: str) -> None:
        self._logger.debug(
            "tenant_retrieved",
            tenant_key=key,
            **self._get_context_kwargs(),
        )

    def tenant_updated(self, key: str, version: int, change: str) -> None:
        self._logger.info(
            "tenant_updated",
            tenant_key=key,
            version=version,
            change=change,
            **self._get_context_kwargs(),
        )

    def concurrent_modification(
        self, key: str, expected_version: int, actual_version: int
    ) -> None:
        self._logger.warning(
            "tenant_concurrent_modification",
            tenant_key=key,
            expected_version=expected_version,
            actual_version=actual_version,
            **self._get_context_kwargs(),
        )

    def tenants_listed(self, count: int) -> None:
        self._logger.debug(
            "tenants_listed",
            count=count,
            **self._get_context_kwargs(),
        )
