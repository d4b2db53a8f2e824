"""PostgreSQL implementation of ITenantRegistry.

Uniqueness is enforced by the unique indexes on the tenants table, which
span soft-deleted rows. Every mutation is a single conditional UPDATE on
(key, version), so a stale writer changes nothing.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from sqlalchemy import exists, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tenancy.domain.tenant import Tenant
from tenancy.domain.value_objects import BillingPlan, TenantId, TenantStatus
from tenancy.infrastructure.models import TenantModel
from tenancy.infrastructure.observability import (
    DefaultTenantRegistryProbe,
    TenantRegistryProbe,
)
from tenancy.ports.exceptions import (
    ConcurrentModificationError,
    DuplicateTenantError,
    TenantNotFoundError,
)
from tenancy.ports.repositories import ITenantRegistry, RegistryScope

# Unique index name -> domain field it protects
_UNIQUE_INDEXES: dict[str, str] = {
    "ix_tenants_key": "key",
    "ix_tenants_subdomain": "subdomain",
    "ix_tenants_schema_name": "schema_name",
}


def _normalize(value: str) -> str:
    return value.strip().lower()


def _to_domain(row: Any) -> Tenant:
    """Build a Tenant from an ORM model or a RETURNING row."""
    return Tenant(
        id=TenantId(value=row.id),
        key=row.key,
        name=row.name,
        subdomain=row.subdomain,
        schema_name=row.schema_name,
        status=TenantStatus(row.status),
        billing_plan=BillingPlan(row.billing_plan),
        settings=dict(row.settings or {}),
        identity_client_id=row.identity_client_id,
        admin_user_id=row.admin_user_id,
        version=row.version,
        deleted=row.deleted,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class TenantRegistry(ITenantRegistry):
    """Registry of stores stored in PostgreSQL.

    The registry never commits. Callers own the transaction, normally
    through a RegistryScope.
    """

    def __init__(
        self,
        session: AsyncSession,
        probe: TenantRegistryProbe | None = None,
    ) -> None:
        """Initialize registry with a database session.

        Args:
            session: AsyncSession the registry runs its statements on
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultTenantRegistryProbe()

    async def find_by_key(
        self, key: str, include_deleted: bool = False
    ) -> Tenant | None:
        stmt = select(TenantModel).where(TenantModel.key == _normalize(key))
        return await self._find_one(stmt, include_deleted)

    async def find_by_subdomain(
        self, subdomain: str, include_deleted: bool = False
    ) -> Tenant | None:
        stmt = select(TenantModel).where(
            TenantModel.subdomain == _normalize(subdomain)
        )
        return await self._find_one(stmt, include_deleted)

    async def exists_by_key(self, key: str) -> bool:
        stmt = select(exists().where(TenantModel.key == _normalize(key)))
        return bool(await self._session.scalar(stmt))

    async def exists_by_subdomain(self, subdomain: str) -> bool:
        stmt = select(exists().where(TenantModel.subdomain == _normalize(subdomain)))
        return bool(await self._session.scalar(stmt))

    async def insert(self, tenant: Tenant) -> Tenant:
        """Insert a new store row.

        Args:
            tenant: The store to insert, normally built by Tenant.register()

        Returns:
            The stored tenant, with timestamps populated

        Raises:
            DuplicateTenantError: If key, subdomain or schema name is taken
        """
        model = TenantModel(
            id=tenant.id.value,
            key=_normalize(tenant.key),
            name=tenant.name,
            subdomain=_normalize(tenant.subdomain),
            schema_name=tenant.schema_name,
            status=tenant.status.value,
            billing_plan=tenant.billing_plan.value,
            settings=dict(tenant.settings),
            identity_client_id=tenant.identity_client_id,
            admin_user_id=tenant.admin_user_id,
            version=tenant.version,
            deleted=tenant.deleted,
        )
        self._session.add(model)

        try:
            # Flush so uniqueness violations surface here, not at commit
            await self._session.flush()
        except IntegrityError as e:
            field = next(
                (f for index, f in _UNIQUE_INDEXES.items() if index in str(e)),
                None,
            )
            if field is None:
                raise
            value = str(getattr(tenant, field))
            self._probe.duplicate_tenant(field, value)
            raise DuplicateTenantError(field=field, value=value) from e

        self._probe.tenant_inserted(model.key, model.schema_name)
        return _to_domain(model)

    async def update_status(
        self, key: str, status: TenantStatus, expected_version: int
    ) -> Tenant:
        return await self._update(
            key, expected_version, f"status={status.value}", status=status.value
        )

    async def update_settings(
        self, key: str, settings: dict[str, Any], expected_version: int
    ) -> Tenant:
        return await self._update(
            key, expected_version, "settings", settings=dict(settings)
        )

    async def soft_delete(self, key: str, expected_version: int) -> Tenant:
        return await self._update(key, expected_version, "deleted", deleted=True)

    async def list_all(self, include_deleted: bool = False) -> list[Tenant]:
        stmt = select(TenantModel).order_by(TenantModel.key)
        if not include_deleted:
            stmt = stmt.where(TenantModel.deleted.is_(False))
        result = await self._session.execute(stmt)
        tenants = [_to_domain(model) for model in result.scalars().all()]
        self._probe.tenants_listed(len(tenants))
        return tenants

    async def _find_one(self, stmt: Any, include_deleted: bool) -> Tenant | None:
        if not include_deleted:
            stmt = stmt.where(TenantModel.deleted.is_(False))
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            return None
        self._probe.tenant_retrieved(model.key)
        return _to_domain(model)

    async def _update(
        self, key: str, expected_version: int, change: str, **values: Any
    ) -> Tenant:
        """Apply ``values`` if the live row still has ``expected_version``.

        Raises:
            TenantNotFoundError: If no live row has this key
            ConcurrentModificationError: If the version moved on
        """
        key = _normalize(key)
        stmt = (
            update(TenantModel)
            .where(
                TenantModel.key == key,
                TenantModel.version == expected_version,
                TenantModel.deleted.is_(False),
            )
            .values(version=TenantModel.version + 1, **values)
            .returning(*TenantModel.__table__.columns)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        row = result.first()

        if row is None:
            current = await self.find_by_key(key)
            if current is None:
                raise TenantNotFoundError(key)
            self._probe.concurrent_modification(key, expected_version, current.version)
            raise ConcurrentModificationError(
                key=key,
                expected_version=expected_version,
                actual_version=current.version,
            )

        self._probe.tenant_updated(key, row.version, change)
        return _to_domain(row)


def registry_scope_factory(
    sessionmaker: async_sessionmaker[AsyncSession],
    probe: TenantRegistryProbe | None = None,
) -> RegistryScope:
    """Build a RegistryScope over a session factory.

    Each scope is one session and one transaction; it commits on a clean
    exit and rolls back when the block raises.
    """

    @asynccontextmanager
    async def scope() -> AsyncIterator[ITenantRegistry]:
        async with sessionmaker() as session:
            async with session.begin():
                yield TenantRegistry(session=session, probe=probe)

    return scope
