"""Unit tests for TenantRegistry against a mocked AsyncSession.

Statement semantics (uniqueness, conditional updates) are covered by the
integration suite; these tests pin the error mapping.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tenancy.domain.tenant import Tenant
from tenancy.domain.value_objects import TenantId, TenantStatus
from tenancy.infrastructure.models import TenantModel
from tenancy.infrastructure.observability import TenantRegistryProbe
from tenancy.infrastructure.tenant_registry import TenantRegistry
from tenancy.ports.exceptions import (
    ConcurrentModificationError,
    DuplicateTenantError,
    TenantNotFoundError,
)


def _integrity_error(message: str) -> IntegrityError:
    return IntegrityError("INSERT INTO tenants ...", {}, Exception(message))


def _result(first=None, scalar=None) -> Mock:
    result = Mock()
    result.first.return_value = first
    result.scalar_one_or_none.return_value = scalar
    return result


def _row(**overrides) -> SimpleNamespace:
    values = {
        "id": TenantId.generate().value,
        "key": "acme-co",
        "name": "Acme Co",
        "subdomain": "acme",
        "schema_name": "store_acme_co",
        "status": "ACTIVE",
        "billing_plan": "BASIC",
        "settings": {},
        "identity_client_id": None,
        "admin_user_id": None,
        "version": 1,
        "deleted": False,
        "created_at": None,
        "updated_at": None,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


@pytest.fixture
def mock_session():
    session = Mock(spec=AsyncSession)
    session.add = Mock()
    session.flush = AsyncMock()
    session.execute = AsyncMock()
    session.scalar = AsyncMock()
    return session


@pytest.fixture
def mock_probe():
    return Mock(spec=TenantRegistryProbe)


@pytest.fixture
def registry(mock_session, mock_probe):
    return TenantRegistry(session=mock_session, probe=mock_probe)


@pytest.fixture
def tenant():
    return Tenant.register(
        key="acme-co",
        name="Acme Co",
        subdomain="acme",
        schema_name="store_acme_co",
    )


class TestInsert:
    @pytest.mark.asyncio
    async def test_adds_model_and_flushes(self, registry, mock_session, tenant):
        stored = await registry.insert(tenant)

        model = mock_session.add.call_args.args[0]
        assert isinstance(model, TenantModel)
        assert model.key == "acme-co"
        assert model.status == "PENDING"
        mock_session.flush.assert_awaited_once()
        assert stored.id == tenant.id
        assert stored.schema_name == "store_acme_co"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "index, field",
        [
            ("ix_tenants_key", "key"),
            ("ix_tenants_subdomain", "subdomain"),
            ("ix_tenants_schema_name", "schema_name"),
        ],
    )
    async def test_unique_violation_becomes_duplicate_error(
        self, registry, mock_session, mock_probe, tenant, index, field
    ):
        mock_session.flush.side_effect = _integrity_error(
            f'duplicate key value violates unique constraint "{index}"'
        )

        with pytest.raises(DuplicateTenantError) as exc_info:
            await registry.insert(tenant)

        assert exc_info.value.field == field
        assert exc_info.value.value == getattr(tenant, field)
        mock_probe.duplicate_tenant.assert_called_once_with(
            field, getattr(tenant, field)
        )

    @pytest.mark.asyncio
    async def test_other_integrity_errors_propagate(
        self, registry, mock_session, tenant
    ):
        mock_session.flush.side_effect = _integrity_error(
            'null value in column "name" violates not-null constraint'
        )

        with pytest.raises(IntegrityError):
            await registry.insert(tenant)


class TestConditionalUpdate:
    @pytest.mark.asyncio
    async def test_returns_updated_tenant(self, registry, mock_session, mock_probe):
        mock_session.execute.return_value = _result(
            first=_row(status="SUSPENDED", version=4)
        )

        updated = await registry.update_status("ACME-CO", TenantStatus.SUSPENDED, 3)

        assert updated.status is TenantStatus.SUSPENDED
        assert updated.version == 4
        mock_probe.tenant_updated.assert_called_once_with(
            "acme-co", 4, "status=SUSPENDED"
        )

    @pytest.mark.asyncio
    async def test_missing_row_is_not_found(self, registry, mock_session):
        mock_session.execute.side_effect = [_result(first=None), _result(scalar=None)]

        with pytest.raises(TenantNotFoundError) as exc_info:
            await registry.soft_delete("ghost", 0)

        assert exc_info.value.key == "ghost"

    @pytest.mark.asyncio
    async def test_stale_version_is_concurrent_modification(
        self, registry, mock_session, mock_probe
    ):
        current = TenantModel(**vars(_row(version=5)))
        mock_session.execute.side_effect = [
            _result(first=None),
            _result(scalar=current),
        ]

        with pytest.raises(ConcurrentModificationError) as exc_info:
            await registry.update_settings("acme-co", {"currency": "EUR"}, 2)

        assert exc_info.value.expected_version == 2
        assert exc_info.value.actual_version == 5
        mock_probe.concurrent_modification.assert_called_once_with("acme-co", 2, 5)


class TestLookups:
    @pytest.mark.asyncio
    async def test_find_by_key_returns_none_when_absent(self, registry, mock_session):
        mock_session.execute.return_value = _result(scalar=None)

        assert await registry.find_by_key("nobody") is None

    @pytest.mark.asyncio
    async def test_exists_by_subdomain(self, registry, mock_session):
        mock_session.scalar.return_value = True

        assert await registry.exists_by_subdomain("Acme") is True
