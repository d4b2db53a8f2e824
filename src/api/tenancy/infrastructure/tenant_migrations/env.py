"""Alembic environment for store schemas.

Runs only through SchemaLifecycleManager, which hands over a connection
that is already inside a transaction, already holds the schema's advisory
lock, and already has ``search_path`` pointing at the store schema.
Revisions therefore create their objects without naming a schema.
"""

from alembic import context

from tenancy.infrastructure.migration_ledger import record_applied_migration

config = context.config

connection = config.attributes.get("connection")
schema_name = config.attributes.get("schema_name")


def _record_applied(*, ctx, step, heads, run_args) -> None:
    """Write the ledger row in the same transaction as the revision."""
    if not step.is_upgrade:
        return
    record_applied_migration(
        ctx.connection,
        schema_name,
        step.up_revision_id,
        step.up_revision.doc or "",
    )


def run_migrations_online() -> None:
    """Run store migrations on the connection supplied by the caller."""
    if connection is None or schema_name is None:
        raise RuntimeError(
            "Store migrations need a connection and a schema name in "
            "config.attributes; run them through SchemaLifecycleManager"
        )

    context.configure(
        connection=connection,
        target_metadata=None,
        version_table_schema=schema_name,
        transaction_per_migration=True,
        on_version_apply=_record_applied,
    )

    with context.begin_transaction():
        context.run_migrations()


if context.is_offline_mode():
    raise RuntimeError("Store migrations do not support offline mode")

run_migrations_online()
