#!/usr/bin/env python3
"""Migrate every store schema to the latest revision.

Runs the default store schema and every registered, non-deleted store
schema through the store migrations, a few at a time. One failing schema
does not stop the others.

Usage:
    uv run python scripts/migrate_store_schemas.py

Environment Variables:
    GOCOMMERCE_DB_*: Database connection (see DatabaseSettings)
    GOCOMMERCE_TENANCY_MIGRATION_CONCURRENCY: Schemas migrated at once (default: 4)

Exit status is 1 if any schema failed to migrate.
"""

import asyncio
import sys
from pathlib import Path

root_path = Path(__file__).parent.parent
sys.path.insert(0, str(root_path / "src" / "api"))

from infrastructure.database.dependencies import (  # noqa: E402
    close_database_connections,
)
from infrastructure.logging import configure_logging  # noqa: E402
from infrastructure.settings import get_settings  # noqa: E402
from tenancy.dependencies.services import get_schema_migration_service  # noqa: E402


async def migrate_store_schemas() -> int:
    configure_logging(get_settings().log_level)
    try:
        outcomes = await get_schema_migration_service().migrate_all()
    finally:
        await close_database_connections()

    for outcome in outcomes:
        if outcome.succeeded:
            applied = ", ".join(outcome.applied) or "up to date"
            print(f"  ok      {outcome.schema_name} ({outcome.tenant_key}): {applied}")
        else:
            print(
                f"  FAILED  {outcome.schema_name} ({outcome.tenant_key}): "
                f"{outcome.error}"
            )

    failed = sum(1 for outcome in outcomes if not outcome.succeeded)
    print(f"{len(outcomes)} schemas, {failed} failed")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(migrate_store_schemas()))
