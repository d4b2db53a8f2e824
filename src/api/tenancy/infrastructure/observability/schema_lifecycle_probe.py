"""Domain probe for store schema lifecycle operations.

Dropping a schema is destructive, so drop events are logged at WARNING
while every other lifecycle event stays at INFO or below.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class SchemaLifecycleProbe(Protocol):
    """Domain probe for creating, migrating and dropping store schemas."""

    def schema_created(self, schema_name: str, applied_revisions: list[str]) -> None:
        """Record that a schema exists and is migrated."""
        ...

    def migration_applied(self, schema_name: str, revision: str) -> None:
        """Record that one revision was applied and recorded."""
        ...

    def schema_up_to_date(self, schema_name: str, revision: str | None) -> None:
        """Record that a migrate call found nothing pending."""
        ...

    def schema_operation_failed(
        self,
        schema_name: str,
        operation: str,
        revision: str | None,
        error: Exception,
    ) -> None:
        """Record that a schema operation failed."""
        ...

    def schema_dropped(self, schema_name: str) -> None:
        """Record that a schema and all its objects were dropped."""
        ...

    def with_context(self, context: ObservationContext) -> SchemaLifecycleProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultSchemaLifecycleProbe:
    """Default implementation of SchemaLifecycleProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultSchemaLifecycleProbe:
        """Create a new probe with observation context bound."""
        return DefaultSchemaLifecycleProbe(logger=self._logger, context=context)

    def schema_created(self, schema_name: str, applied_revisions: list[str]) -> None:
        self._logger.info(
            "schema_created",
            schema_name=schema_name,
            applied_revisions=applied_revisions,
            **self._get_context_kwargs(),
        )

    def migration_applied(self, schema_name: str, revision: str) -> None:
        self._logger.info(
            "schema_migration_applied",
            schema_name=schema_name,
            revision=revision,
            **self._get_context_kwargs(),
        )

    def schema_up_to_date(self, schema_name: str, revision: str | None) -> None:
        self._logger.debug(
            "schema_up_to_date",
            schema_name=schema_name,
            revision=revision,
            **self._get_context_kwargs(),
        )

    def schema_operation_failed(
        self,
        schema_name: str,
        operation: str,
        revision: str | None,
        error: Exception,
    ) -> None:
        self._logger.error(
            "schema_operation_failed",
            schema_name=schema_name,
            operation=operation,
            revision=revision,
            error_type=type(error).__name__,
            error=str(error),
            **self._get_context_kwargs(),
        )

    def schema_dropped(self, schema_name: str) -> None:
        self._logger.warning(
            "schema_dropped",
            schema_name=schema_name,
            **self._get_context_kwargs(),
        )
