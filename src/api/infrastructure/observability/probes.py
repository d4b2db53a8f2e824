"""Domain probes for the database engines.

Two engines exist, ``write`` and ``read``. Both pin the registry schema on
their connections, so pool events carry it; a wrong schema here explains
an empty registry at startup.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class ConnectionProbe(Protocol):
    """Domain probe for engine pool lifecycle."""

    def pool_initialized(
        self, role: str, registry_schema: str, min_conn: int, max_conn: int
    ) -> None:
        """Record that the ``role`` engine was created."""
        ...

    def pool_closed(self, role: str) -> None:
        """Record that the ``role`` engine was disposed."""
        ...

    def with_context(self, context: ObservationContext) -> ConnectionProbe:
        ...


class DefaultConnectionProbe:
    """ConnectionProbe backed by structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultConnectionProbe:
        return DefaultConnectionProbe(logger=self._logger, context=context)

    def pool_initialized(
        self, role: str, registry_schema: str, min_conn: int, max_conn: int
    ) -> None:
        self._logger.info(
            "connection_pool_initialized",
            pool=role,
            registry_schema=registry_schema,
            min_connections=min_conn,
            max_connections=max_conn,
            **self._get_context_kwargs(),
        )

    def pool_closed(self, role: str) -> None:
        self._logger.info(
            "connection_pool_closed",
            pool=role,
            **self._get_context_kwargs(),
        )
