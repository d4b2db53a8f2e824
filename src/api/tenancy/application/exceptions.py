"""Application-level exceptions for the Tenancy bounded context."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tenancy.domain.exceptions import TenancyError

if TYPE_CHECKING:
    from tenancy.domain.provisioning import ProvisioningAttempt
    from tenancy.domain.value_objects import ProvisioningStage


class ProvisioningError(TenancyError):
    """Raised when store provisioning fails after validation.

    Names the stage that failed and carries the attempt, including any
    resources it created that no registry row references. The original
    failure is chained as ``__cause__``.
    """

    def __init__(
        self,
        stage: ProvisioningStage,
        tenant_key: str,
        attempt: ProvisioningAttempt,
        reason: str,
    ):
        super().__init__(
            f"Provisioning of store '{tenant_key}' failed at {stage.value}: {reason}"
        )
        self.stage = stage
        self.tenant_key = tenant_key
        self.attempt = attempt

    @property
    def orphaned_resources(self) -> dict[str, str]:
        return self.attempt.orphaned_resources()
