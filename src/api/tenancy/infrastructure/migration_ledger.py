"""Append-only migration ledger kept inside every store schema.

One row per applied revision, written on the same connection and inside
the same transaction as the revision itself, so a failed revision leaves
no row behind.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import (
    Column,
    Connection,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    func,
    insert,
    select,
    text,
)

from tenancy.infrastructure.identifiers import quote_schema
from tenancy.ports.schema import MigrationRecord

LEDGER_TABLE = "schema_migration_history"

_metadata = MetaData()

ledger = Table(
    LEDGER_TABLE,
    _metadata,
    Column("installed_rank", Integer, primary_key=True),
    Column("version", String(32), nullable=False, unique=True),
    Column("description", String(200), nullable=False),
    Column("installed_on", DateTime(timezone=True), nullable=False),
)


def _in_schema(schema_name: str) -> dict[str, Any]:
    return {"schema_translate_map": {None: schema_name}}


def ensure_ledger(connection: Connection, schema_name: str) -> None:
    """Create the ledger table in ``schema_name`` if it does not exist."""
    connection.execute(
        text(
            f"CREATE TABLE IF NOT EXISTS {quote_schema(schema_name)}.{LEDGER_TABLE} ("
            "installed_rank INTEGER GENERATED ALWAYS AS IDENTITY PRIMARY KEY, "
            "version VARCHAR(32) NOT NULL UNIQUE, "
            "description VARCHAR(200) NOT NULL, "
            "installed_on TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT now())"
        )
    )


def record_applied_migration(
    connection: Connection,
    schema_name: str,
    version: str,
    description: str,
) -> None:
    """Append one applied revision to the ledger."""
    connection.execute(
        insert(ledger).values(
            version=version,
            description=(description or "").strip()[:200],
            installed_on=func.now(),
        ),
        execution_options=_in_schema(schema_name),
    )


def read_ledger(connection: Connection, schema_name: str) -> list[MigrationRecord]:
    """Read the ledger oldest first; empty if the schema has none yet."""
    exists = connection.scalar(
        text("SELECT to_regclass(:name)"),
        {"name": f"{schema_name}.{LEDGER_TABLE}"},
    )
    if exists is None:
        return []

    result = connection.execute(
        select(ledger).order_by(ledger.c.installed_rank),
        execution_options=_in_schema(schema_name),
    )
    return [
        MigrationRecord(
            installed_rank=row.installed_rank,
            version=row.version,
            description=row.description,
            installed_on=row.installed_on,
        )
        for row in result
    ]
