"""Engine and session-factory singletons for FastAPI dependencies.

Two pools exist: ``write`` (registry mutations, provisioning, schema DDL
and routed store sessions) and ``read`` (tenant resolution lookups). Each
is created on first use and disposed by ``close_database_connections``.
"""

from __future__ import annotations

import threading
from typing import Callable, Literal

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_read_engine, create_write_engine
from infrastructure.observability import DefaultConnectionProbe
from infrastructure.settings import DatabaseSettings, get_database_settings

PoolRole = Literal["write", "read"]

_ENGINE_FACTORIES: dict[PoolRole, Callable[[DatabaseSettings], AsyncEngine]] = {
    "write": create_write_engine,
    "read": create_read_engine,
}

_probe = DefaultConnectionProbe()

_engines: dict[PoolRole, AsyncEngine] = {}
_sessionmakers: dict[PoolRole, async_sessionmaker[AsyncSession]] = {}

_engine_lock = threading.Lock()


def _get_engine(role: PoolRole) -> AsyncEngine:
    """Return the engine for ``role``, creating it and its sessionmaker once.

    Double-checked under a lock so concurrent first calls from worker
    threads build a single pool.
    """
    engine = _engines.get(role)
    if engine is None:
        with _engine_lock:
            engine = _engines.get(role)
            if engine is None:
                settings = get_database_settings()
                engine = _ENGINE_FACTORIES[role](settings)
                # Registry scopes hand out domain objects after commit
                _sessionmakers[role] = async_sessionmaker(
                    engine, expire_on_commit=False, class_=AsyncSession
                )
                _engines[role] = engine
                _probe.pool_initialized(
                    role=role,
                    registry_schema=settings.registry_schema,
                    min_conn=settings.pool_min_connections,
                    max_conn=settings.pool_max_connections,
                )
    return engine


def get_write_engine() -> AsyncEngine:
    """Engine for registry writes, provisioning and schema DDL."""
    return _get_engine("write")


def get_read_engine() -> AsyncEngine:
    """Engine for resolution lookups against the registry."""
    return _get_engine("read")


def get_write_sessionmaker() -> async_sessionmaker[AsyncSession]:
    _get_engine("write")
    return _sessionmakers["write"]


def get_read_sessionmaker() -> async_sessionmaker[AsyncSession]:
    _get_engine("read")
    return _sessionmakers["read"]


async def close_database_connections() -> None:
    """Dispose every engine created so far.

    Called on application shutdown and by the bulk migration script. The
    next getter call builds a fresh pool.
    """
    with _engine_lock:
        engines = list(_engines.items())
        _engines.clear()
        _sessionmakers.clear()

    for role, engine in engines:
        await engine.dispose()
        _probe.pool_closed(role=role)
