"""Domain probe for tenant-routed database sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class ConnectionRouterProbe(Protocol):
    """Domain probe for binding sessions to store schemas."""

    def session_routed(self, schema_name: str, tenant_key: str) -> None:
        """Record that a session was opened for a store schema."""
        ...

    def with_context(self, context: ObservationContext) -> ConnectionRouterProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultConnectionRouterProbe:
    """Default implementation of ConnectionRouterProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultConnectionRouterProbe:
        """Create a new probe with observation context bound."""
        return DefaultConnectionRouterProbe(logger=self._logger, context=context)

    def session_routed(self, schema_name: str, tenant_key: str) -> None:
        self._logger.debug(
            "session_routed",
            schema_name=schema_name,
            tenant_key=tenant_key,
            **self._get_context_kwargs(),
        )
