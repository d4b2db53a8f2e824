"""Fixtures shared by Tenancy unit tests."""

from unittest.mock import AsyncMock, Mock

import pytest

from infrastructure.settings import TenancySettings
from tenancy.ports.identity import IIdentityProvider
from tenancy.ports.schema import ISchemaManager
from tests.unit.tenancy.doubles import InMemoryTenantRegistry


@pytest.fixture
def tenancy_settings() -> TenancySettings:
    """Tenancy settings with the shipped defaults."""
    return TenancySettings()


@pytest.fixture
def in_memory_registry() -> InMemoryTenantRegistry:
    return InMemoryTenantRegistry()


@pytest.fixture
def mock_schema_manager():
    """Mock ISchemaManager."""
    manager = Mock(spec=ISchemaManager)
    manager.create_schema = AsyncMock(return_value=["3f1c0a9d2b71"])
    manager.migrate = AsyncMock(return_value=[])
    manager.drop_schema = AsyncMock(return_value=None)
    manager.schema_exists = AsyncMock(return_value=True)
    manager.applied_migrations = AsyncMock(return_value=[])
    return manager


@pytest.fixture
def mock_identity_provider():
    """Mock IIdentityProvider."""
    provider = Mock(spec=IIdentityProvider)
    provider.create_client = AsyncMock(return_value="client-uuid")
    provider.create_user = AsyncMock(return_value="user-uuid")
    provider.assign_role = AsyncMock(return_value=None)
    return provider
