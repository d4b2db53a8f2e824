"""Domain probe for bulk migration of store schemas."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class SchemaMigrationProbe(Protocol):
    """Domain probe for migrating every store schema."""

    def bulk_migration_started(self, schema_count: int, concurrency: int) -> None:
        """Record that a migration run over all schemas began."""
        ...

    def schema_migrated(
        self, schema_name: str, tenant_key: str, applied: list[str]
    ) -> None:
        """Record that one schema finished migrating."""
        ...

    def schema_migration_failed(
        self, schema_name: str, tenant_key: str, error: str
    ) -> None:
        """Record that one schema failed to migrate."""
        ...

    def bulk_migration_completed(self, schema_count: int, failed_count: int) -> None:
        """Record the outcome of a migration run."""
        ...

    def with_context(self, context: ObservationContext) -> SchemaMigrationProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultSchemaMigrationProbe:
    """Default implementation of SchemaMigrationProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultSchemaMigrationProbe:
        """Create a new probe with observation context bound."""
        return DefaultSchemaMigrationProbe(logger=self._logger, context=context)

    def bulk_migration_started(self, schema_count: int, concurrency: int) -> None:
        self._logger.info(
            "bulk_schema_migration_started",
            schema_count=schema_count,
            concurrency=concurrency,
            **self._get_context_kwargs(),
        )

    def schema_migrated(
        self, schema_name: str, tenant_key: str, applied: list[str]
    ) -> None:
        self._logger.info(
            "store_schema_migrated",
            schema_name=schema_name,
            tenant_key=tenant_key,
            applied=applied,
            **self._get_context_kwargs(),
        )

    def schema_migration_failed(
        self, schema_name: str, tenant_key: str, error: str
    ) -> None:
        self._logger.error(
            "store_schema_migration_failed",
            schema_name=schema_name,
            tenant_key=tenant_key,
            error=error,
            **self._get_context_kwargs(),
        )

    def bulk_migration_completed(self, schema_count: int, failed_count: int) -> None:
        self._logger.info(
            "bulk_schema_migration_completed",
            schema_count=schema_count,
            failed_count=failed_count,
            **self._get_context_kwargs(),
        )
