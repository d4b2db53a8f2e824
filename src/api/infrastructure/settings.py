"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

import re
from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Mirrors tenancy.domain.schema_name; settings load before the domain layer.
_SAFE_SCHEMA_NAME = re.compile(r"^[a-z_][a-z0-9_]{0,62}$")


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        GOCOMMERCE_DB_HOST: Database host (default: localhost)
        GOCOMMERCE_DB_PORT: Database port (default: 5432)
        GOCOMMERCE_DB_DATABASE: Database name (default: gocommerce)
        GOCOMMERCE_DB_USERNAME: Database user (default: gocommerce)
        GOCOMMERCE_DB_PASSWORD: Database password (required in production)
        GOCOMMERCE_DB_REGISTRY_SCHEMA: Registry schema (default: public)
        GOCOMMERCE_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        GOCOMMERCE_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="GOCOMMERCE_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="gocommerce", description="Database name")
    username: str = Field(default="gocommerce", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    registry_schema: str = Field(
        default="public",
        description="Schema holding the tenant registry tables",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )

    @field_validator("registry_schema")
    @classmethod
    def validate_registry_schema(cls, value: str) -> str:
        """Registry schema is quoted into DDL, so it must be a safe identifier."""
        if not _SAFE_SCHEMA_NAME.match(value):
            raise ValueError(f"registry_schema '{value}' is not a safe identifier")
        return value

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class TenancySettings(BaseSettings):
    """Tenant resolution, schema lifecycle and store provisioning settings.

    Environment variables:
        GOCOMMERCE_TENANCY_TENANT_HEADER: Header carrying an explicit tenant key
        GOCOMMERCE_TENANCY_DEFAULT_TENANT_KEY: Key of the fallback tenant
        GOCOMMERCE_TENANCY_DEFAULT_SCHEMA_NAME: Schema of the fallback tenant
        GOCOMMERCE_TENANCY_SCHEMA_PREFIX: Prefix of derived store schema names
        GOCOMMERCE_TENANCY_RESERVED_SUBDOMAINS: JSON list of host labels never
            treated as a store subdomain
        GOCOMMERCE_TENANCY_RESOLUTION_STRATEGIES: JSON list, in precedence order,
            drawn from "header" and "subdomain"
        GOCOMMERCE_TENANCY_TENANT_MIGRATIONS_LOCATION: Alembic script location
            for store schemas
        GOCOMMERCE_TENANCY_BOOTSTRAP_DEFAULT_TENANT: Ensure the default tenant
            exists at startup (default: true)
        GOCOMMERCE_TENANCY_MIGRATION_CONCURRENCY: Parallel schemas during bulk
            migration (default: 4)
    """

    model_config = SettingsConfigDict(
        env_prefix="GOCOMMERCE_TENANCY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    tenant_header: str = Field(
        default="X-Tenant",
        description="Request header carrying an explicit tenant key",
    )
    default_tenant_key: str = Field(
        default="default",
        description="Key of the tenant used when no signal resolves",
    )
    default_tenant_name: str = Field(
        default="Default Store",
        description="Display name of the default tenant",
    )
    default_schema_name: str = Field(
        default="store_default",
        description="Schema used when no signal resolves",
    )
    schema_prefix: str = Field(
        default="store_",
        description="Prefix of derived store schema names",
    )
    reserved_subdomains: list[str] = Field(
        default_factory=lambda: ["www"],
        description="Host labels never treated as a store subdomain",
    )
    resolution_strategies: list[Literal["header", "subdomain"]] = Field(
        default_factory=lambda: ["header", "subdomain"],
        description="Resolution strategies in precedence order",
    )
    tenant_migrations_location: str = Field(
        default="tenancy.infrastructure:tenant_migrations",
        description="Alembic script location of store schemas",
    )
    bootstrap_default_tenant: bool = Field(
        default=True,
        description="Ensure the default tenant exists at startup",
    )
    store_domain: str = Field(
        default="gocommerce.com",
        description="Parent domain of store storefronts",
    )
    store_admin_role: str = Field(
        default="STORE_ADMIN",
        description="Identity-provider realm role granted to store admins",
    )
    default_currency: str = Field(default="USD", description="Default store currency")
    default_locale: str = Field(default="en-US", description="Default store locale")
    migration_concurrency: int = Field(
        default=4,
        description="Schemas migrated in parallel during bulk migration",
        ge=1,
        le=64,
    )

    @field_validator("default_schema_name", "schema_prefix")
    @classmethod
    def validate_schema_identifiers(cls, value: str) -> str:
        """Schema names are quoted into DDL, so they must be safe identifiers."""
        if not _SAFE_SCHEMA_NAME.match(value):
            raise ValueError(f"'{value}' is not a safe schema identifier")
        return value

    @field_validator("reserved_subdomains")
    @classmethod
    def normalize_reserved_subdomains(cls, value: list[str]) -> list[str]:
        """Normalize reserved labels to lowercase."""
        return [label.strip().lower() for label in value if label.strip()]

    @field_validator("resolution_strategies")
    @classmethod
    def validate_resolution_strategies(cls, value: list[str]) -> list[str]:
        """Each strategy may appear once."""
        if len(set(value)) != len(value):
            raise ValueError("resolution_strategies must not contain duplicates")
        return value


class KeycloakSettings(BaseSettings):
    """Identity provider (Keycloak admin API) settings.

    Environment variables:
        GOCOMMERCE_KEYCLOAK_URL: Keycloak base URL
        GOCOMMERCE_KEYCLOAK_REALM: Realm holding store clients and users
        GOCOMMERCE_KEYCLOAK_ADMIN_REALM: Realm used to obtain admin tokens
        GOCOMMERCE_KEYCLOAK_ADMIN_CLIENT_ID: Client used to obtain admin tokens
        GOCOMMERCE_KEYCLOAK_ADMIN_USERNAME: Admin username
        GOCOMMERCE_KEYCLOAK_ADMIN_PASSWORD: Admin password
        GOCOMMERCE_KEYCLOAK_TIMEOUT_SECONDS: HTTP timeout (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="GOCOMMERCE_KEYCLOAK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    url: str = Field(default="http://localhost:8180", description="Keycloak base URL")
    realm: str = Field(default="gocommerce", description="Realm for store identities")
    admin_realm: str = Field(default="master", description="Realm for admin tokens")
    admin_client_id: str = Field(default="admin-cli", description="Admin token client")
    admin_username: str = Field(default="admin", description="Admin username")
    admin_password: SecretStr = Field(
        default=SecretStr(""),
        description="Admin password",
    )
    timeout_seconds: float = Field(
        default=10.0,
        description="HTTP timeout for admin API calls",
        gt=0,
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_prefix="GOCOMMERCE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="GoCommerce API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Minimum log level",
    )

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def tenancy(self) -> TenancySettings:
        """Get tenancy settings."""
        return get_tenancy_settings()

    @property
    def keycloak(self) -> KeycloakSettings:
        """Get identity provider settings."""
        return get_keycloak_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_tenancy_settings() -> TenancySettings:
    """Get cached tenancy settings."""
    return TenancySettings()


@lru_cache
def get_keycloak_settings() -> KeycloakSettings:
    """Get cached identity provider settings."""
    return KeycloakSettings()
