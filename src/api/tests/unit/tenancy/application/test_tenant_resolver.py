"""Unit tests for TenantResolver and its strategies."""

import asyncio
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, Mock

import pytest
from sqlalchemy.exc import OperationalError

from shared_kernel.middleware.observability import TenantResolutionProbe
from shared_kernel.middleware.tenant_context import ResolutionSource
from tenancy.application.tenant_resolver import (
    HeaderKeyStrategy,
    SubdomainStrategy,
    TenantResolver,
    TenantSignals,
    build_strategies,
    subdomain_from_host,
)
from tenancy.domain.exceptions import InvalidSchemaNameError
from tenancy.domain.value_objects import TenantStatus
from tenancy.ports.repositories import ITenantRegistry
from tests.unit.tenancy.doubles import InMemoryTenantRegistry, make_scope, make_tenant


@pytest.fixture
def registry() -> InMemoryTenantRegistry:
    registry = InMemoryTenantRegistry()
    registry.add(make_tenant("acme-co", "acme", "store_acme_co"))
    registry.add(make_tenant("globex", "globex", "store_globex"))
    return registry


@pytest.fixture
def mock_probe():
    return Mock(spec=TenantResolutionProbe)


def _resolver(registry, probe, names=("header", "subdomain")) -> TenantResolver:
    return TenantResolver(
        registry_scope=make_scope(registry),
        strategies=build_strategies(list(names)),
        default_tenant_key="default",
        default_schema_name="store_default",
        probe=probe,
    )


class TestSubdomainFromHost:
    """Tests for subdomain_from_host()."""

    @pytest.mark.parametrize(
        "host,expected",
        [
            ("acme.example.com", "acme"),
            ("ACME.Example.com", "acme"),
            ("acme.example.com:8443", "acme"),
            ("acme.example.com.", "acme"),
            ("acme.localhost", "acme"),
        ],
    )
    def test_extracts_first_label(self, host, expected):
        assert subdomain_from_host(host, ("www",)) == expected

    @pytest.mark.parametrize(
        "host",
        [
            None,
            "",
            "localhost",
            "localhost:8000",
            "www.example.com",
            "127.0.0.1",
            "127.0.0.1:8000",
            "[::1]:8000",
            ".example.com",
        ],
    )
    def test_yields_nothing_for_unusable_hosts(self, host):
        assert subdomain_from_host(host, ("www",)) is None


class TestBuildStrategies:
    def test_preserves_configured_order(self):
        strategies = build_strategies(["subdomain", "header"])

        assert isinstance(strategies[0], SubdomainStrategy)
        assert isinstance(strategies[1], HeaderKeyStrategy)

    def test_unknown_strategy_is_rejected(self):
        with pytest.raises(ValueError, match="cookie"):
            build_strategies(["header", "cookie"])


class TestResolve:
    """Tests for TenantResolver.resolve()."""

    @pytest.mark.asyncio
    async def test_header_resolves_store(self, registry, mock_probe):
        context = await _resolver(registry, mock_probe).resolve(
            TenantSignals(tenant_key="acme-co")
        )

        assert context.schema_name == "store_acme_co"
        assert context.tenant_key == "acme-co"
        assert context.source == ResolutionSource.HEADER
        mock_probe.tenant_resolved.assert_called_once_with(context)

    @pytest.mark.asyncio
    async def test_header_is_case_insensitive(self, registry, mock_probe):
        context = await _resolver(registry, mock_probe).resolve(
            TenantSignals(tenant_key="  ACME-CO ")
        )

        assert context.schema_name == "store_acme_co"

    @pytest.mark.asyncio
    async def test_subdomain_resolves_store(self, registry, mock_probe):
        context = await _resolver(registry, mock_probe).resolve(
            TenantSignals(host="acme.example.com")
        )

        assert context.schema_name == "store_acme_co"
        assert context.source == ResolutionSource.SUBDOMAIN

    @pytest.mark.asyncio
    async def test_header_wins_over_host(self, registry, mock_probe):
        context = await _resolver(registry, mock_probe).resolve(
            TenantSignals(tenant_key="globex", host="acme.example.com")
        )

        assert context.schema_name == "store_globex"
        assert context.source == ResolutionSource.HEADER

    @pytest.mark.asyncio
    async def test_configured_order_changes_precedence(self, registry, mock_probe):
        resolver = _resolver(registry, mock_probe, names=("subdomain", "header"))

        context = await resolver.resolve(
            TenantSignals(tenant_key="globex", host="acme.example.com")
        )

        assert context.schema_name == "store_acme_co"

    @pytest.mark.asyncio
    async def test_unknown_header_falls_through_to_host(self, registry, mock_probe):
        context = await _resolver(registry, mock_probe).resolve(
            TenantSignals(tenant_key="nobody", host="acme.example.com")
        )

        assert context.schema_name == "store_acme_co"
        mock_probe.tenant_signal_unmatched.assert_called_once_with("header", "nobody")

    @pytest.mark.asyncio
    async def test_no_signals_yields_default(self, registry, mock_probe):
        context = await _resolver(registry, mock_probe).resolve(TenantSignals())

        assert context.schema_name == "store_default"
        assert context.tenant_key == "default"
        assert context.source == ResolutionSource.DEFAULT
        assert context.is_default

    @pytest.mark.asyncio
    async def test_default_fallback_does_not_touch_registry(self, mock_probe):
        registry = Mock(spec=ITenantRegistry)

        context = await _resolver(registry, mock_probe).resolve(
            TenantSignals(host="www.example.com")
        )

        assert context.is_default
        registry.find_by_key.assert_not_called()
        registry.find_by_subdomain.assert_not_called()

    @pytest.mark.asyncio
    async def test_reserved_www_label_yields_default(self, registry, mock_probe):
        context = await _resolver(registry, mock_probe).resolve(
            TenantSignals(host="www.example.com")
        )

        assert context.is_default

    @pytest.mark.asyncio
    async def test_unknown_subdomain_yields_default(self, registry, mock_probe):
        context = await _resolver(registry, mock_probe).resolve(
            TenantSignals(host="initech.example.com")
        )

        assert context.is_default

    @pytest.mark.asyncio
    async def test_deleted_store_is_not_resolved(self, registry, mock_probe):
        registry.add(make_tenant("gone", "gone", "store_gone", deleted=True))

        context = await _resolver(registry, mock_probe).resolve(
            TenantSignals(tenant_key="gone")
        )

        assert context.is_default

    @pytest.mark.asyncio
    async def test_suspended_store_still_resolves(self, registry, mock_probe):
        registry.add(
            make_tenant("hooli", "hooli", "store_hooli", status=TenantStatus.SUSPENDED)
        )

        context = await _resolver(registry, mock_probe).resolve(
            TenantSignals(host="hooli.example.com")
        )

        assert context.schema_name == "store_hooli"

    @pytest.mark.asyncio
    async def test_registry_failure_degrades_to_next_level(self, registry, mock_probe):
        failing = Mock(spec=ITenantRegistry)
        failing.find_by_key = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("connection refused"))
        )
        failing.find_by_subdomain = registry.find_by_subdomain

        context = await _resolver(failing, mock_probe).resolve(
            TenantSignals(tenant_key="acme-co", host="globex.example.com")
        )

        assert context.schema_name == "store_globex"
        degraded = mock_probe.resolution_degraded.call_args.args[0]
        assert degraded.level == "header"
        assert degraded.signal == "acme-co"
        assert degraded.error_type == "OperationalError"

    @pytest.mark.asyncio
    async def test_registry_unreachable_yields_default(self, mock_probe):
        @asynccontextmanager
        async def broken_scope():
            raise ConnectionRefusedError("registry down")
            yield

        resolver = TenantResolver(
            registry_scope=broken_scope,
            strategies=build_strategies(["header", "subdomain"]),
            default_tenant_key="default",
            default_schema_name="store_default",
            probe=mock_probe,
        )

        context = await resolver.resolve(
            TenantSignals(tenant_key="acme-co", host="acme.example.com")
        )

        assert context.is_default
        assert mock_probe.resolution_degraded.call_count == 2

    @pytest.mark.asyncio
    async def test_cancellation_is_not_swallowed(self, mock_probe):
        registry = Mock(spec=ITenantRegistry)
        registry.find_by_key = AsyncMock(side_effect=asyncio.CancelledError())

        with pytest.raises(asyncio.CancelledError):
            await _resolver(registry, mock_probe).resolve(
                TenantSignals(tenant_key="acme-co")
            )

        mock_probe.resolution_degraded.assert_not_called()

    @pytest.mark.asyncio
    async def test_registry_changes_apply_to_next_resolution(
        self, registry, mock_probe
    ):
        resolver = _resolver(registry, mock_probe)
        first = await resolver.resolve(TenantSignals(tenant_key="acme-co"))

        registry.rows["acme-co"].deleted = True
        second = await resolver.resolve(TenantSignals(tenant_key="acme-co"))

        assert first.schema_name == "store_acme_co"
        assert second.is_default

    def test_unsafe_default_schema_is_rejected(self, registry, mock_probe):
        with pytest.raises(InvalidSchemaNameError):
            TenantResolver(
                registry_scope=make_scope(registry),
                strategies=(),
                default_tenant_key="default",
                default_schema_name="public; DROP",
                probe=mock_probe,
            )

    def test_strategy_names(self, registry, mock_probe):
        resolver = _resolver(registry, mock_probe, names=("subdomain",))

        assert resolver.strategy_names == ["subdomain"]
