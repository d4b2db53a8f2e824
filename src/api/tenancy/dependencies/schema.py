"""Schema lifecycle manager dependency."""

from __future__ import annotations

import threading

from infrastructure.database.dependencies import get_write_engine
from infrastructure.settings import get_tenancy_settings
from tenancy.infrastructure.schema_manager import SchemaLifecycleManager

# Module-level manager instance (created on first use)
_schema_manager: SchemaLifecycleManager | None = None
_schema_manager_lock = threading.Lock()


def get_schema_manager() -> SchemaLifecycleManager:
    """Get the schema lifecycle manager (singleton).

    Bound to the write engine and the store migration scripts configured
    in TenancySettings.
    """
    global _schema_manager
    if _schema_manager is None:
        with _schema_manager_lock:
            if _schema_manager is None:
                settings = get_tenancy_settings()
                _schema_manager = SchemaLifecycleManager(
                    engine=get_write_engine(),
                    migrations_location=settings.tenant_migrations_location,
                )
    return _schema_manager


def reset_schema_manager() -> None:
    """Forget the manager; called after the engines are disposed."""
    global _schema_manager
    _schema_manager = None
