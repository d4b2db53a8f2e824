"""Tenant resolution context value objects.

This module contains the pure value objects that describe how a request
was mapped to a store schema. They are framework-agnostic and carry no
business logic, making them safe for the shared kernel.

The resolution logic itself lives in the tenancy bounded context.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ResolutionSource(StrEnum):
    """Signal that decided the schema of a request."""

    HEADER = "header"
    SUBDOMAIN = "subdomain"
    DEFAULT = "default"


@dataclass(frozen=True)
class TenantResolutionContext:
    """Resolved store for the current unit of work.

    Created once per request and handed explicitly to whatever opens a
    store-scoped database session. Never mutated and never shared between
    requests.

    Attributes:
        schema_name: Store schema every query of the request runs against.
        tenant_key: Key of the resolved store.
        source: Which signal produced the result.
    """

    schema_name: str
    tenant_key: str
    source: ResolutionSource

    @property
    def is_default(self) -> bool:
        """Whether no request signal matched and the fallback was used."""
        return self.source is ResolutionSource.DEFAULT


@dataclass(frozen=True)
class ResolutionDegraded:
    """A precedence level that could not be evaluated.

    Recorded when a registry lookup raises instead of answering. This is an
    observation, never an exception: resolution continues with the next level.

    Attributes:
        level: Strategy that failed ("header" or "subdomain").
        signal: The header value or host label that was being looked up.
        error_type: Class name of the lookup error.
        error: Message of the lookup error.
    """

    level: str
    signal: str
    error_type: str
    error: str

    @classmethod
    def from_exception(
        cls, level: str, signal: str, error: Exception
    ) -> ResolutionDegraded:
        return cls(
            level=level,
            signal=signal,
            error_type=type(error).__name__,
            error=str(error),
        )
