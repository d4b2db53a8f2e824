"""Store provisioning service for the Tenancy bounded context.

Onboards a new store: validates the request, creates and migrates its
schema, registers it with the identity provider, writes the registry row,
applies default settings and activates it.

Nothing is rolled back automatically. A failure after the schema exists
logs every resource the attempt created that no registry row references,
at error severity, for out-of-band reconciliation. A schema name is bound
to one store key for good, so dropping it here could destroy a schema
that a concurrent attempt for the same key already owns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, NoReturn

from infrastructure.settings import TenancySettings
from tenancy.application.default_configuration import (
    build_default_settings,
    merge_settings,
)
from tenancy.application.exceptions import ProvisioningError
from tenancy.application.observability import (
    DefaultStoreProvisioningProbe,
    StoreProvisioningProbe,
)
from tenancy.domain.exceptions import TenancyError, TenantValidationError
from tenancy.domain.provisioning import ProvisioningAttempt
from tenancy.domain.schema_name import derive_schema_name
from tenancy.domain.tenant import Tenant
from tenancy.domain.value_objects import (
    BillingPlan,
    ProvisioningStage,
    TenantStatus,
    normalize_subdomain,
    normalize_tenant_key,
    validate_email,
)
from tenancy.ports.exceptions import (
    DuplicateTenantError,
    IdentityProvisioningError,
)
from tenancy.ports.identity import (
    AdminUserRegistration,
    ClientRegistration,
    IIdentityProvider,
)
from tenancy.ports.repositories import RegistryScope
from tenancy.ports.schema import ISchemaManager

STORE_NAME_MAX_LENGTH = 255


@dataclass(frozen=True)
class StoreProvisioningRequest:
    """Input for onboarding one store."""

    key: str
    name: str
    subdomain: str
    admin_username: str
    admin_email: str
    admin_first_name: str | None = None
    admin_last_name: str | None = None
    admin_password: str | None = None
    billing_plan: BillingPlan = BillingPlan.BASIC
    settings: dict[str, Any] = field(default_factory=dict)


class StoreProvisioningService:
    """Drives a ProvisioningAttempt from VALIDATING to ACTIVE or FAILED."""

    def __init__(
        self,
        registry_scope: RegistryScope,
        schema_manager: ISchemaManager,
        identity_provider: IIdentityProvider,
        settings: TenancySettings,
        probe: StoreProvisioningProbe | None = None,
    ):
        """Initialize StoreProvisioningService with dependencies.

        Args:
            registry_scope: Opens a registry transaction per step
            schema_manager: Creates and migrates store schemas
            identity_provider: Creates the store client and admin user
            settings: Tenancy settings (schema prefix, reserved names, defaults)
            probe: Optional domain probe for observability
        """
        self._registry_scope = registry_scope
        self._schema_manager = schema_manager
        self._identity_provider = identity_provider
        self._settings = settings
        self._probe = probe or DefaultStoreProvisioningProbe()

    async def provision_store(self, request: StoreProvisioningRequest) -> Tenant:
        """Onboard a store.

        Args:
            request: Store and administrator details

        Returns:
            The registered Tenant in status ACTIVE

        Raises:
            TenantValidationError: If the request is malformed or uses a
                reserved key or subdomain
            DuplicateTenantError: If the key or subdomain is taken, including
                when a concurrent attempt claims it after validation passed
            ProvisioningError: If any later step fails, or the registry
                cannot be read during validation
        """
        attempt = ProvisioningAttempt(
            tenant_key=(request.key or "").strip().lower(),
            subdomain=(request.subdomain or "").strip().lower(),
        )
        self._probe.provisioning_started(attempt.tenant_key, attempt.subdomain)

        try:
            await self._validate(request, attempt)
        except TenancyError as e:
            attempt.fail()
            self._probe.provisioning_rejected(attempt.tenant_key, str(e))
            raise
        except Exception as e:
            await self._fail(attempt, e)

        try:
            await self._create_schema(attempt)
            await self._provision_identity(request, attempt)
            await self._register(request, attempt)
            await self._configure(request, attempt)
            await self._activate(attempt)
        except Exception as e:
            await self._fail(attempt, e)

        assert attempt.tenant is not None
        self._probe.provisioning_completed(
            attempt.tenant_key, attempt.tenant.schema_name
        )
        return attempt.tenant

    async def _validate(
        self, request: StoreProvisioningRequest, attempt: ProvisioningAttempt
    ) -> None:
        key = normalize_tenant_key(request.key)
        subdomain = normalize_subdomain(request.subdomain)
        attempt.tenant_key = key
        attempt.subdomain = subdomain

        if key == self._settings.default_tenant_key:
            raise TenantValidationError(f"Store key '{key}' is reserved", field="key")
        reserved = {label.lower() for label in self._settings.reserved_subdomains}
        if subdomain in reserved or subdomain == self._settings.default_tenant_key:
            raise TenantValidationError(
                f"Subdomain '{subdomain}' is reserved", field="subdomain"
            )

        name = (request.name or "").strip()
        if not name:
            raise TenantValidationError("Store name is required", field="name")
        if len(name) > STORE_NAME_MAX_LENGTH:
            raise TenantValidationError(
                f"Store name must be at most {STORE_NAME_MAX_LENGTH} characters",
                field="name",
            )
        if not (request.admin_username or "").strip():
            raise TenantValidationError(
                "Administrator username is required", field="admin_username"
            )
        validate_email(request.admin_email)

        attempt.schema_name = derive_schema_name(key, self._settings.schema_prefix)

        async with self._registry_scope() as registry:
            if await registry.exists_by_key(key):
                raise DuplicateTenantError(field="key", value=key)
            if await registry.exists_by_subdomain(subdomain):
                raise DuplicateTenantError(field="subdomain", value=subdomain)

    async def _create_schema(self, attempt: ProvisioningAttempt) -> None:
        self._enter(attempt, ProvisioningStage.SCHEMA_CREATING)
        assert attempt.schema_name is not None
        await self._schema_manager.create_schema(attempt.schema_name)
        attempt.schema_created = True

    async def _provision_identity(
        self, request: StoreProvisioningRequest, attempt: ProvisioningAttempt
    ) -> None:
        self._enter(attempt, ProvisioningStage.IDENTITY_PROVISIONING)
        origin = f"https://{attempt.subdomain}.{self._settings.store_domain}"
        client_id = f"{attempt.tenant_key}-client"
        try:
            attempt.identity_client_id = await self._identity_provider.create_client(
                ClientRegistration(
                    client_id=client_id,
                    name=(request.name or "").strip(),
                    redirect_uris=[f"{origin}/*"],
                    web_origins=[origin],
                )
            )
        except IdentityProvisioningError as e:
            # The client id embeds the store key, so a conflict means another
            # attempt already owns the key.
            if e.status_code == 409:
                raise DuplicateTenantError(field="key", value=attempt.tenant_key) from e
            raise

        attempt.admin_user_id = await self._identity_provider.create_user(
            AdminUserRegistration(
                username=request.admin_username.strip(),
                email=request.admin_email.strip(),
                first_name=request.admin_first_name,
                last_name=request.admin_last_name,
                password=request.admin_password,
            )
        )
        await self._identity_provider.assign_role(
            attempt.admin_user_id, self._settings.store_admin_role
        )

    async def _register(
        self, request: StoreProvisioningRequest, attempt: ProvisioningAttempt
    ) -> None:
        self._enter(attempt, ProvisioningStage.REGISTERING)
        assert attempt.schema_name is not None
        tenant = Tenant.register(
            key=attempt.tenant_key,
            name=(request.name or "").strip(),
            subdomain=attempt.subdomain,
            schema_name=attempt.schema_name,
            billing_plan=request.billing_plan,
            identity_client_id=attempt.identity_client_id,
            admin_user_id=attempt.admin_user_id,
        )
        async with self._registry_scope() as registry:
            attempt.tenant = await registry.insert(tenant)

    async def _configure(
        self, request: StoreProvisioningRequest, attempt: ProvisioningAttempt
    ) -> None:
        self._enter(attempt, ProvisioningStage.CONFIGURING)
        assert attempt.tenant is not None
        defaults = build_default_settings(
            attempt.tenant,
            store_domain=self._settings.store_domain,
            currency=self._settings.default_currency,
            locale=self._settings.default_locale,
        )
        settings = merge_settings(defaults, request.settings)
        async with self._registry_scope() as registry:
            attempt.tenant = await registry.update_settings(
                attempt.tenant_key, settings, attempt.tenant.version
            )

    async def _activate(self, attempt: ProvisioningAttempt) -> None:
        assert attempt.tenant is not None
        async with self._registry_scope() as registry:
            attempt.tenant = await registry.update_status(
                attempt.tenant_key, TenantStatus.ACTIVE, attempt.tenant.version
            )
        self._enter(attempt, ProvisioningStage.ACTIVE)

    def _enter(self, attempt: ProvisioningAttempt, stage: ProvisioningStage) -> None:
        attempt.advance(stage)
        self._probe.stage_entered(attempt.tenant_key, stage)

    async def _fail(
        self, attempt: ProvisioningAttempt, error: Exception
    ) -> NoReturn:
        """Move the attempt to FAILED, report what was left behind and raise.

        A failure before registration is re-checked against the registry: if
        another attempt has claimed the key or subdomain meanwhile, the
        caller gets DuplicateTenantError rather than a stage failure.
        """
        failed_stage = attempt.fail()

        conflict = error if isinstance(error, DuplicateTenantError) else None
        if (
            conflict is None
            and not attempt.registered
            and failed_stage != ProvisioningStage.VALIDATING
        ):
            conflict = await self._find_conflict(attempt)
        if conflict is not None and conflict.field in ("key", "schema_name"):
            # The schema name derives from the key, so the schema is the rival's
            attempt.schema_claimed_elsewhere = True

        orphans = attempt.orphaned_resources()
        if orphans:
            self._probe.orphaned_resources(attempt.tenant_key, failed_stage, orphans)
        if attempt.registered:
            await self._mark_failed(attempt)

        if conflict is not None:
            self._probe.provisioning_rejected(attempt.tenant_key, str(conflict))
            if conflict is error:
                raise error
            raise conflict from error

        self._probe.provisioning_failed(attempt.tenant_key, failed_stage, str(error))
        raise ProvisioningError(
            stage=failed_stage,
            tenant_key=attempt.tenant_key,
            attempt=attempt,
            reason=str(error),
        ) from error

    async def _find_conflict(
        self, attempt: ProvisioningAttempt
    ) -> DuplicateTenantError | None:
        """Return the uniqueness conflict the registry now shows, if any."""
        try:
            async with self._registry_scope() as registry:
                if await registry.exists_by_key(attempt.tenant_key):
                    return DuplicateTenantError(field="key", value=attempt.tenant_key)
                if await registry.exists_by_subdomain(attempt.subdomain):
                    return DuplicateTenantError(
                        field="subdomain", value=attempt.subdomain
                    )
        except Exception as e:
            self._probe.conflict_check_failed(attempt.tenant_key, str(e))
        return None

    async def _mark_failed(self, attempt: ProvisioningAttempt) -> None:
        assert attempt.tenant is not None
        try:
            async with self._registry_scope() as registry:
                attempt.tenant = await registry.update_status(
                    attempt.tenant_key, TenantStatus.FAILED, attempt.tenant.version
                )
        except Exception as e:
            self._probe.failure_not_recorded(attempt.tenant_key, str(e))
