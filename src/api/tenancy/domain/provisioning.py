"""Provisioning attempt state machine.

One ProvisioningAttempt tracks a single run of the store onboarding
workflow: which stage it reached, and which external resources it created
along the way, so that a failure can name exactly what was left behind.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from tenancy.domain.tenant import Tenant
from tenancy.domain.value_objects import ProvisioningStage

_STAGE_SEQUENCE: tuple[ProvisioningStage, ...] = (
    ProvisioningStage.VALIDATING,
    ProvisioningStage.SCHEMA_CREATING,
    ProvisioningStage.IDENTITY_PROVISIONING,
    ProvisioningStage.REGISTERING,
    ProvisioningStage.CONFIGURING,
    ProvisioningStage.ACTIVE,
)


@dataclass
class ProvisioningAttempt:
    """Progress of one provisioning run for one store key.

    Stages only move forward, one at a time, until ACTIVE. FAILED can be
    entered from any non-terminal stage and records where the run stopped.
    """

    tenant_key: str
    subdomain: str
    stage: ProvisioningStage = ProvisioningStage.VALIDATING
    failed_stage: ProvisioningStage | None = None
    schema_name: str | None = None
    schema_created: bool = False
    schema_claimed_elsewhere: bool = False
    identity_client_id: str | None = None
    admin_user_id: str | None = None
    tenant: Tenant | None = None
    history: list[ProvisioningStage] = field(
        default_factory=lambda: [ProvisioningStage.VALIDATING]
    )

    @property
    def is_terminal(self) -> bool:
        return self.stage.is_terminal

    @property
    def registered(self) -> bool:
        """Whether a registry row exists for this attempt."""
        return self.tenant is not None

    def advance(self, stage: ProvisioningStage) -> None:
        """Move to the next stage.

        Raises:
            ValueError: If the attempt already ended or ``stage`` is not the
                immediate successor of the current stage
        """
        if self.is_terminal:
            raise ValueError(f"Provisioning attempt already ended in {self.stage}")
        expected = _STAGE_SEQUENCE[_STAGE_SEQUENCE.index(self.stage) + 1]
        if stage != expected:
            raise ValueError(
                f"Cannot move provisioning from {self.stage} to {stage}; "
                f"next stage is {expected}"
            )
        self.stage = stage
        self.history.append(stage)

    def fail(self) -> ProvisioningStage:
        """Move to FAILED and return the stage that failed.

        Raises:
            ValueError: If the attempt already ended
        """
        if self.is_terminal:
            raise ValueError(f"Provisioning attempt already ended in {self.stage}")
        self.failed_stage = self.stage
        self.stage = ProvisioningStage.FAILED
        self.history.append(ProvisioningStage.FAILED)
        return self.failed_stage

    def orphaned_resources(self) -> dict[str, str]:
        """External resources created by this attempt that no registry row references.

        Once the attempt is registered the row points at the schema and the
        identity resources, so nothing is orphaned. A schema another store's
        row already names is never listed: creating it was a no-op here.
        """
        if self.registered:
            return {}
        resources: dict[str, str] = {}
        if (
            self.schema_created
            and self.schema_name is not None
            and not self.schema_claimed_elsewhere
        ):
            resources["schema_name"] = self.schema_name
        if self.identity_client_id is not None:
            resources["identity_client_id"] = self.identity_client_id
        if self.admin_user_id is not None:
            resources["admin_user_id"] = self.admin_user_id
        return resources
