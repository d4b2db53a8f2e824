"""Domain probe for application startup and lifecycle events.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events during application initialization and shutdown.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class StartupProbe(Protocol):
    """Domain probe for application startup operations."""

    def default_tenant_bootstrapped(self, tenant_key: str, schema_name: str) -> None:
        """Record that the default tenant was registered at startup."""
        ...

    def default_tenant_already_exists(self, tenant_key: str, schema_name: str) -> None:
        """Record that the default tenant was already registered."""
        ...

    def default_tenant_bootstrap_disabled(self) -> None:
        """Record that default tenant bootstrap is disabled by configuration."""
        ...

    def resolution_strategies_configured(self, strategies: list[str]) -> None:
        """Record the resolution strategy chain selected at startup."""
        ...

    def with_context(self, context: ObservationContext) -> StartupProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultStartupProbe:
    """Default implementation of StartupProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultStartupProbe:
        """Create a new probe with observation context bound."""
        return DefaultStartupProbe(logger=self._logger, context=context)

    def default_tenant_bootstrapped(self, tenant_key: str, schema_name: str) -> None:
        """Record that the default tenant was registered at startup."""
        self._logger.info(
            "default_tenant_bootstrapped",
            tenant_key=tenant_key,
            schema_name=schema_name,
            **self._get_context_kwargs(),
        )

    def default_tenant_already_exists(self, tenant_key: str, schema_name: str) -> None:
        """Record that the default tenant was already registered."""
        self._logger.info(
            "default_tenant_already_exists",
            tenant_key=tenant_key,
            schema_name=schema_name,
            **self._get_context_kwargs(),
        )

    def default_tenant_bootstrap_disabled(self) -> None:
        """Record that default tenant bootstrap is disabled by configuration."""
        self._logger.info(
            "default_tenant_bootstrap_disabled",
            **self._get_context_kwargs(),
        )

    def resolution_strategies_configured(self, strategies: list[str]) -> None:
        """Record the resolution strategy chain selected at startup."""
        self._logger.info(
            "resolution_strategies_configured",
            strategies=strategies,
            **self._get_context_kwargs(),
        )
