"""Domain probe for store administration."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class TenantAdministrationProbe(Protocol):
    """Domain probe for store administration operations."""

    def store_status_changed(
        self, tenant_key: str, previous: str, current: str, version: int
    ) -> None:
        """Record that a store changed lifecycle status."""
        ...

    def store_decommissioned(
        self, tenant_key: str, schema_name: str, schema_dropped: bool
    ) -> None:
        """Record that a store was soft-deleted."""
        ...

    def default_store_protected(self, tenant_key: str, operation: str) -> None:
        """Record that a change to the default store was refused."""
        ...

    def with_context(self, context: ObservationContext) -> TenantAdministrationProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantAdministrationProbe:
    """Default implementation of TenantAdministrationProbe using structlog."""

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

    def with_context(
        self, context: ObservationContext
    ) -> DefaultTenantAdministrationProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantAdministrationProbe(logger=self._logger, context=context)

    def store_status_changed(
        self, tenant_key: str, previous: str, current: str, version: int
    ) -> None:
        self._logger.info(
            "store_status_changed",
            tenant_key=tenant_key,
            previous=previous,
            current=current,
            version=version,
            **self._get_context_kwargs(),
        )

    def store_decommissioned(
        self, tenant_key: str, schema_name: str, schema_dropped: bool
    ) -> None:
        self._logger.warning(
            "store_decommissioned",
            tenant_key=tenant_key,
            schema_name=schema_name,
            schema_dropped=schema_dropped,
            **self._get_context_kwargs(),
        )

    def default_store_protected(self, tenant_key: str, operation: str) -> None:
        self._logger.warning(
            "default_store_protected",
            tenant_key=tenant_key,
            operation=operation,
            **self._get_context_kwargs(),
        )
