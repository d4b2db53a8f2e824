"""Async SQLAlchemy engines for the registry and the store schemas.

Every pooled connection starts with its session-level search_path pointing at
the registry schema. Store schemas are only ever entered through
``SET LOCAL search_path`` inside a transaction, so a connection returned to
the pool always falls back to the registry.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

if TYPE_CHECKING:
    from infrastructure.settings import DatabaseSettings

__all__ = [
    "create_write_engine",
    "create_read_engine",
    "build_async_url",
    "build_connect_args",
]

APPLICATION_NAME = "gocommerce-api"


def create_write_engine(settings: DatabaseSettings) -> AsyncEngine:
    """Engine for registry mutations, schema DDL and tenant-routed sessions."""
    return _create_engine(settings, pool="write")


def create_read_engine(settings: DatabaseSettings) -> AsyncEngine:
    """Engine for resolution lookups.

    A separate pool, so per-request lookups never queue behind provisioning
    DDL holding write connections.
    """
    return _create_engine(settings, pool="read")


def _create_engine(settings: DatabaseSettings, pool: str) -> AsyncEngine:
    # QueuePool retains up to pool_size idle connections and closes overflow
    # ones on return; pool_size + max_overflow is the hard cap.
    return create_async_engine(
        build_async_url(settings),
        pool_size=settings.pool_min_connections,
        max_overflow=settings.pool_max_connections - settings.pool_min_connections,
        pool_pre_ping=True,
        connect_args=build_connect_args(settings, pool=pool),
    )


def build_connect_args(
    settings: DatabaseSettings, pool: str | None = None
) -> dict[str, Any]:
    """Build asyncpg connect arguments.

    Args:
        settings: Database connection settings
        pool: Pool role, appended to ``application_name`` so the two pools
            can be told apart in ``pg_stat_activity``

    Returns:
        Connect arguments pinning the session search_path to the registry schema
    """
    application_name = APPLICATION_NAME
    if pool is not None:
        application_name = f"{APPLICATION_NAME}:{pool}"
    return {
        "server_settings": {
            "search_path": settings.registry_schema,
            "application_name": application_name,
        }
    }


def build_async_url(settings: DatabaseSettings) -> str:
    """Build the ``postgresql+asyncpg`` URL with percent-encoded credentials."""
    url = URL.create(
        drivername="postgresql+asyncpg",
        username=settings.username,
        password=settings.password.get_secret_value(),
        host=settings.host,
        port=settings.port,
        database=settings.database,
    )
    return url.render_as_string(hide_password=False)
