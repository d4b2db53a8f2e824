"""Store schema lifecycle backed by PostgreSQL and Alembic.

Store schemas share one Alembic script location. Each schema keeps its own
``alembic_version`` table and migration ledger, so schemas can sit at
different revisions and are migrated independently.

Every revision runs in its own transaction together with its ledger row.
Transactions that touch a schema first take a transaction-scoped advisory
lock keyed on the schema name: work on one schema is serialized, work on
different schemas is not.
"""

from __future__ import annotations

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import Connection, text
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from infrastructure.database.exceptions import is_connectivity_error
from tenancy.domain.schema_name import validate_schema_name
from tenancy.infrastructure.identifiers import quote_schema
from tenancy.infrastructure.migration_ledger import ensure_ledger, read_ledger
from tenancy.infrastructure.observability import (
    DefaultSchemaLifecycleProbe,
    SchemaLifecycleProbe,
)
from tenancy.ports.exceptions import SchemaOperationError
from tenancy.ports.schema import ISchemaManager, MigrationRecord

# Schemas no store may ever own
PROTECTED_SCHEMAS = frozenset(
    {"public", "information_schema", "pg_catalog", "pg_toast"}
)

_ADVISORY_LOCK = text("SELECT pg_advisory_xact_lock(hashtext(:schema_name))")


def _current_revision(connection: Connection, schema_name: str) -> str | None:
    context = MigrationContext.configure(
        connection,
        opts={"version_table_schema": schema_name},
    )
    return context.get_current_revision()


class SchemaLifecycleManager(ISchemaManager):
    """Creates, migrates and drops store schemas.

    Connectivity failures are re-raised untouched. Any other failure becomes
    a SchemaOperationError. Nothing is retried here.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        migrations_location: str,
        protected_schemas: frozenset[str] = PROTECTED_SCHEMAS,
        probe: SchemaLifecycleProbe | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            engine: Engine used for DDL; needs CREATE on the database
            migrations_location: Alembic script location of store migrations,
                a path or ``package:directory``
            protected_schemas: Schemas that must never be dropped
            probe: Optional domain probe for observability
        """
        self._engine = engine
        self._location = migrations_location
        self._protected = protected_schemas
        self._probe = probe or DefaultSchemaLifecycleProbe()
        self._script: ScriptDirectory | None = None

    async def create_schema(self, schema_name: str) -> list[str]:
        """Create ``schema_name`` if missing, then bring it to the latest revision.

        Returns:
            Revisions applied by this call; empty when already up to date

        Raises:
            InvalidSchemaNameError: If the name is not a safe identifier
            SchemaOperationError: If creation or a migration fails
        """
        quoted = quote_schema(schema_name)

        try:
            async with self._engine.begin() as conn:
                await self._lock(conn, schema_name)
                await conn.execute(text(f"CREATE SCHEMA IF NOT EXISTS {quoted}"))
        except Exception as e:
            if is_connectivity_error(e):
                raise
            self._probe.schema_operation_failed(schema_name, "create", None, e)
            raise SchemaOperationError(
                schema_name, "create", message=str(e)
            ) from e

        applied = await self.migrate(schema_name)
        self._probe.schema_created(schema_name, applied)
        return applied

    async def migrate(self, schema_name: str) -> list[str]:
        """Apply every pending revision in ascending order.

        One transaction per revision. When revision N fails, revisions before
        it stay applied and recorded, N is neither, and the error names N.

        Returns:
            Revisions applied by this call

        Raises:
            InvalidSchemaNameError: If the name is not a safe identifier
            SchemaOperationError: If the schema is missing or a revision fails
        """
        validate_schema_name(schema_name)

        if not await self.schema_exists(schema_name):
            error = SchemaOperationError(
                schema_name, "migrate", message="schema does not exist"
            )
            self._probe.schema_operation_failed(schema_name, "migrate", None, error)
            raise error

        revisions = self._ordered_revisions()
        async with self._engine.connect() as conn:
            current = await conn.run_sync(_current_revision, schema_name)

        if current is None:
            pending = revisions
        elif current in revisions:
            pending = revisions[revisions.index(current) + 1 :]
        else:
            error = SchemaOperationError(
                schema_name,
                "migrate",
                version=current,
                message="schema is at a revision unknown to this release",
            )
            self._probe.schema_operation_failed(schema_name, "migrate", current, error)
            raise error

        applied: list[str] = []
        for revision in pending:
            try:
                async with self._engine.begin() as conn:
                    await self._lock(conn, schema_name)
                    upgraded = await conn.run_sync(
                        self._upgrade_to, schema_name, revision
                    )
            except Exception as e:
                if is_connectivity_error(e):
                    raise
                self._probe.schema_operation_failed(schema_name, "migrate", revision, e)
                raise SchemaOperationError(
                    schema_name, "migrate", version=revision, message=str(e)
                ) from e

            if upgraded:
                applied.append(revision)
                self._probe.migration_applied(schema_name, revision)

        if not applied:
            self._probe.schema_up_to_date(schema_name, current)
        return applied

    async def drop_schema(self, schema_name: str) -> None:
        """Drop ``schema_name`` and everything in it.

        Succeeds when the schema does not exist. Never touches the registry.

        Raises:
            InvalidSchemaNameError: If the name is not a safe identifier
            SchemaOperationError: If the schema is protected or the drop fails
        """
        quoted = quote_schema(schema_name)
        if schema_name in self._protected:
            error = SchemaOperationError(
                schema_name, "drop", message="schema is protected"
            )
            self._probe.schema_operation_failed(schema_name, "drop", None, error)
            raise error

        try:
            async with self._engine.begin() as conn:
                await self._lock(conn, schema_name)
                await conn.execute(text(f"DROP SCHEMA IF EXISTS {quoted} CASCADE"))
        except Exception as e:
            if is_connectivity_error(e):
                raise
            self._probe.schema_operation_failed(schema_name, "drop", None, e)
            raise SchemaOperationError(schema_name, "drop", message=str(e)) from e

        self._probe.schema_dropped(schema_name)

    async def schema_exists(self, schema_name: str) -> bool:
        validate_schema_name(schema_name)
        async with self._engine.connect() as conn:
            found = await conn.scalar(
                text(
                    "SELECT EXISTS (SELECT 1 FROM information_schema.schemata "
                    "WHERE schema_name = :schema_name)"
                ),
                {"schema_name": schema_name},
            )
        return bool(found)

    async def applied_migrations(self, schema_name: str) -> list[MigrationRecord]:
        validate_schema_name(schema_name)
        async with self._engine.connect() as conn:
            return await conn.run_sync(read_ledger, schema_name)

    def available_revisions(self) -> list[str]:
        """Revisions shipped with this release, oldest first."""
        return list(self._ordered_revisions())

    async def _lock(self, conn: AsyncConnection, schema_name: str) -> None:
        await conn.execute(_ADVISORY_LOCK, {"schema_name": schema_name})

    def _script_directory(self) -> ScriptDirectory:
        if self._script is None:
            self._script = ScriptDirectory.from_config(self._alembic_config())
        return self._script

    def _ordered_revisions(self) -> list[str]:
        script = self._script_directory()
        heads = script.get_heads()
        if len(heads) > 1:
            raise RuntimeError(
                f"Store migrations at {self._location} have multiple heads: {heads}"
            )
        return [s.revision for s in reversed(list(script.walk_revisions()))]

    def _alembic_config(
        self,
        connection: Connection | None = None,
        schema_name: str | None = None,
    ) -> Config:
        config = Config()
        config.set_main_option("script_location", self._location)
        if connection is not None:
            # Read by the store migration environment (env.py)
            config.attributes["connection"] = connection
            config.attributes["schema_name"] = schema_name
        return config

    def _upgrade_to(
        self, connection: Connection, schema_name: str, revision: str
    ) -> bool:
        """Apply exactly ``revision`` on a connection already holding the lock.

        Runs inside the caller's transaction. Returns False when a concurrent
        migrator applied the revision first.
        """
        quoted = quote_schema(schema_name)
        connection.execute(text(f"SET LOCAL search_path TO {quoted}"))
        ensure_ledger(connection, schema_name)

        current = _current_revision(connection, schema_name)
        if current is not None:
            script = self._script_directory()
            already_applied = {
                s.revision for s in script.walk_revisions(base="base", head=current)
            }
            if revision in already_applied:
                return False

        command.upgrade(self._alembic_config(connection, schema_name), revision)
        return True
