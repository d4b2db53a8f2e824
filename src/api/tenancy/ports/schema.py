"""Schema lifecycle port for the Tenancy bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class MigrationRecord:
    """One row of a store schema's migration ledger."""

    installed_rank: int
    version: str
    description: str
    installed_on: datetime


@runtime_checkable
class ISchemaManager(Protocol):
    """Creates, migrates and drops physical store schemas.

    Every operation validates the schema name before it reaches SQL.
    Connectivity failures propagate untouched and nothing is retried.
    """

    async def create_schema(self, schema_name: str) -> list[str]:
        """Create the schema if missing, then migrate it.

        Idempotent: on a fully migrated schema this changes nothing.

        Returns:
            Revisions applied by this call

        Raises:
            SchemaOperationError: If creation or a migration fails
        """
        ...

    async def migrate(self, schema_name: str) -> list[str]:
        """Apply pending migrations in ascending order, one transaction each.

        Returns:
            Revisions applied by this call

        Raises:
            SchemaOperationError: Naming the failed revision; earlier
                revisions stay applied and recorded
        """
        ...

    async def drop_schema(self, schema_name: str) -> None:
        """Drop the schema and everything in it.

        Dropping a schema that does not exist succeeds. The registry is
        never touched.
        """
        ...

    async def schema_exists(self, schema_name: str) -> bool:
        """Tell whether the schema exists."""
        ...

    async def applied_migrations(self, schema_name: str) -> list[MigrationRecord]:
        """Read the migration ledger of a schema, oldest first."""
        ...
