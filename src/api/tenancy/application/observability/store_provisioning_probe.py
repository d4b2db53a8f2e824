"""Domain probe for store provisioning.

Following Domain-Oriented Observability patterns, this probe captures the
stage-by-stage progress of onboarding a store. Orphaned resources are
logged at error severity so an out-of-band reconciliation job can find
them.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext
    from tenancy.domain.value_objects import ProvisioningStage


class StoreProvisioningProbe(Protocol):
    """Domain probe for the store provisioning workflow."""

    def provisioning_started(self, tenant_key: str, subdomain: str) -> None:
        """Record that a provisioning attempt began."""
        ...

    def stage_entered(self, tenant_key: str, stage: ProvisioningStage) -> None:
        """Record that an attempt moved to a new stage."""
        ...

    def provisioning_rejected(self, tenant_key: str, reason: str) -> None:
        """Record that input failed validation or a uniqueness check."""
        ...

    def provisioning_completed(self, tenant_key: str, schema_name: str) -> None:
        """Record that a store reached ACTIVE."""
        ...

    def provisioning_failed(
        self, tenant_key: str, stage: ProvisioningStage, error: str
    ) -> None:
        """Record that a step after validation failed."""
        ...

    def orphaned_resources(
        self, tenant_key: str, stage: ProvisioningStage, resources: dict[str, str]
    ) -> None:
        """Record resources that no registry row references."""
        ...

    def failure_not_recorded(self, tenant_key: str, error: str) -> None:
        """Record that the FAILED status could not be written to the registry."""
        ...

    def conflict_check_failed(self, tenant_key: str, error: str) -> None:
        """Record that the post-failure uniqueness re-check could not run."""
        ...

    def with_context(self, context: ObservationContext) -> StoreProvisioningProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultStoreProvisioningProbe:
    """Default implementation of StoreProvisioningProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(
        self, context: ObservationContext
    ) -> DefaultStoreProvisioningProbe:
        """Create a new probe with observation context bound."""
        return DefaultStoreProvisioningProbe(logger=self._logger, context=context)

    def provisioning_started(self, tenant_key: str, subdomain: str) -> None:
        self._logger.info(
            "store_provisioning_started",
            tenant_key=tenant_key,
            subdomain=subdomain,
            **self._get_context_kwargs(),
        )

    def stage_entered(self, tenant_key: str, stage: ProvisioningStage) -> None:
        self._logger.debug(
            "store_provisioning_stage_entered",
            tenant_key=tenant_key,
            stage=stage.value,
            **self._get_context_kwargs(),
        )

    def provisioning_rejected(self, tenant_key: str, reason: str) -> None:
        self._logger.info(
            "store_provisioning_rejected",
            tenant_key=tenant_key,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def provisioning_completed(self, tenant_key: str, schema_name: str) -> None:
        self._logger.info(
            "store_provisioned",
            tenant_key=tenant_key,
            schema_name=schema_name,
            **self._get_context_kwargs(),
        )

    def provisioning_failed(
        self, tenant_key: str, stage: ProvisioningStage, error: str
    ) -> None:
        self._logger.error(
            "store_provisioning_failed",
            tenant_key=tenant_key,
            stage=stage.value,
            error=error,
            **self._get_context_kwargs(),
        )

    def orphaned_resources(
        self, tenant_key: str, stage: ProvisioningStage, resources: dict[str, str]
    ) -> None:
        self._logger.error(
            "store_provisioning_orphaned_resources",
            tenant_key=tenant_key,
            stage=stage.value,
            resources=resources,
            **self._get_context_kwargs(),
        )

    def failure_not_recorded(self, tenant_key: str, error: str) -> None:
        self._logger.error(
            "store_provisioning_failure_not_recorded",
            tenant_key=tenant_key,
            error=error,
            **self._get_context_kwargs(),
        )

    def conflict_check_failed(self, tenant_key: str, error: str) -> None:
        self._logger.warning(
            "store_provisioning_conflict_check_failed",
            tenant_key=tenant_key,
            error=error,
            **self._get_context_kwargs(),
        )
