"""Domain probe for tenant context resolution.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to resolving a request to a store
schema from the tenant header or the host subdomain.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext
    from shared_kernel.middleware.tenant_context import (
        ResolutionDegraded,
        TenantResolutionContext,
    )


class TenantResolutionProbe(Protocol):
    """Domain probe for tenant context resolution operations."""

    def tenant_resolved(self, context: TenantResolutionContext) -> None:
        """Record that a request was mapped to a store schema."""
        ...

    def tenant_signal_unmatched(self, level: str, signal: str) -> None:
        """Record that a signal was present but named no registered store."""
        ...

    def resolution_degraded(self, degraded: ResolutionDegraded) -> None:
        """Record that a registry lookup failed and resolution fell through."""
        ...

    def with_context(self, context: ObservationContext) -> TenantResolutionProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantResolutionProbe:
    """Default implementation of TenantResolutionProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantResolutionProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantResolutionProbe(logger=self._logger, context=context)

    def tenant_resolved(self, context: TenantResolutionContext) -> None:
        """Record that a request was mapped to a store schema."""
        self._logger.debug(
            "tenant_resolved",
            tenant_key=context.tenant_key,
            schema_name=context.schema_name,
            source=context.source.value,
            **self._get_context_kwargs(),
        )

    def tenant_signal_unmatched(self, level: str, signal: str) -> None:
        """Record that a signal was present but named no registered store."""
        self._logger.debug(
            "tenant_signal_unmatched",
            level=level,
            signal=signal,
            **self._get_context_kwargs(),
        )

    def resolution_degraded(self, degraded: ResolutionDegraded) -> None:
        """Record that a registry lookup failed and resolution fell through."""
        self._logger.info(
            "tenant_resolution_degraded",
            level=degraded.level,
            signal=degraded.signal,
            error_type=degraded.error_type,
            error=degraded.error,
            **self._get_context_kwargs(),
        )
