"""Domain probe for identity provider calls."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class IdentityProviderProbe(Protocol):
    """Domain probe for identity-provider administration."""

    def client_created(self, client_id: str, internal_id: str) -> None:
        """Record that a store client was created."""
        ...

    def user_created(self, username: str, user_id: str) -> None:
        """Record that a user account was created."""
        ...

    def role_assigned(self, user_id: str, role_name: str) -> None:
        """Record that a realm role was granted."""
        ...

    def request_failed(
        self, operation: str, status_code: int | None, error: str
    ) -> None:
        """Record that an admin API call failed."""
        ...

    def with_context(self, context: ObservationContext) -> IdentityProviderProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultIdentityProviderProbe:
    """Default implementation of IdentityProviderProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultIdentityProviderProbe:
        """Create a new probe with observation context bound."""
        return DefaultIdentityProviderProbe(logger=self._logger, context=context)

    def client_created(self, client_id: str, internal_id: str) -> None:
        self._logger.info(
            "identity_client_created",
            client_id=client_id,
            internal_id=internal_id,
            **self._get_context_kwargs(),
        )

    def user_created(self, username: str, user_id: str) -> None:
        self._logger.info(
            "identity_user_created",
            username=username,
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def role_assigned(self, user_id: str, role_name: str) -> None:
        self._logger.info(
            "identity_role_assigned",
            user_id=user_id,
            role_name=role_name,
            **self._get_context_kwargs(),
        )

    def request_failed(
        self, operation: str, status_code: int | None, error: str
    ) -> None:
        self._logger.error(
            "identity_request_failed",
            operation=operation,
            status_code=status_code,
            error=error,
            **self._get_context_kwargs(),
        )
