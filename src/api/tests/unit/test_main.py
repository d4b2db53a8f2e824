"""Unit tests for main FastAPI application configuration."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from infrastructure.settings import TenancySettings


def test_health_check():
    from main import app

    response = TestClient(app).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_routes_are_mounted():
    from main import app

    paths = set(app.openapi()["paths"])

    assert "/stores" in paths
    assert "/stores/{key}/status" in paths
    assert "/tenant/context" in paths


@pytest.fixture
def lifespan_mocks():
    """Patch everything the lifespan touches outside the process."""
    bootstrap_service = MagicMock()
    bootstrap_service.ensure_default_tenant = AsyncMock()
    resolver = MagicMock()
    resolver.strategy_names = ["header", "subdomain"]

    with (
        patch("main.get_tenant_resolver", return_value=resolver),
        patch(
            "main.get_tenant_bootstrap_service", return_value=bootstrap_service
        ),
        patch("main.close_identity_provider", new_callable=AsyncMock) as close_idp,
        patch(
            "main.close_database_connections", new_callable=AsyncMock
        ) as close_db,
        patch("main.reset_tenant_resolver") as reset_resolver,
        patch("main.reset_schema_manager") as reset_manager,
    ):
        yield {
            "bootstrap": bootstrap_service,
            "close_idp": close_idp,
            "close_db": close_db,
            "reset_resolver": reset_resolver,
            "reset_manager": reset_manager,
        }


def test_lifespan_bootstraps_default_tenant(lifespan_mocks):
    from main import app

    with patch(
        "main.get_tenancy_settings",
        return_value=TenancySettings(bootstrap_default_tenant=True),
    ):
        with TestClient(app):
            lifespan_mocks["bootstrap"].ensure_default_tenant.assert_awaited_once()

    lifespan_mocks["close_idp"].assert_awaited_once()
    lifespan_mocks["close_db"].assert_awaited_once()
    lifespan_mocks["reset_resolver"].assert_called_once()
    lifespan_mocks["reset_manager"].assert_called_once()


def test_lifespan_skips_bootstrap_when_disabled(lifespan_mocks):
    from main import app

    with patch(
        "main.get_tenancy_settings",
        return_value=TenancySettings(bootstrap_default_tenant=False),
    ):
        with TestClient(app):
            pass

    lifespan_mocks["bootstrap"].ensure_default_tenant.assert_not_awaited()


@pytest.mark.asyncio
async def test_lifespan_closes_resources_when_bootstrap_fails(lifespan_mocks):
    from asgi_lifespan import LifespanManager

    from main import app

    lifespan_mocks["bootstrap"].ensure_default_tenant.side_effect = RuntimeError(
        "registry unreachable"
    )

    with patch(
        "main.get_tenancy_settings",
        return_value=TenancySettings(bootstrap_default_tenant=True),
    ):
        with pytest.raises(RuntimeError, match="registry unreachable"):
            async with LifespanManager(app):
                pass

    lifespan_mocks["close_idp"].assert_awaited_once()
    lifespan_mocks["close_db"].assert_awaited_once()
