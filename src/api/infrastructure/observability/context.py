"""Observation context for domain-oriented observability.

Observation contexts collect and manage contextual metadata for instrumentation,
following the Domain Oriented Observability pattern.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Captures request-scoped metadata that should be included with all
    instrumentation events. Store identity is not part of the context;
    probes log it explicitly on the events that concern a store.

    Attributes:
        request_id: Unique identifier for the current request/operation.
        origin: What triggered the operation, e.g. "http" or "startup".
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(request_id="req-123", origin="http")
        probe = DefaultStoreProvisioningProbe().with_context(context)
    """

    request_id: str | None = None
    origin: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self.origin is not None:
            result["origin"] = self.origin
        result.update(self.extra)
        return result

    def with_extra(self, **kwargs: Any) -> ObservationContext:
        """Create a new context with additional metadata."""
        return ObservationContext(
            request_id=self.request_id,
            origin=self.origin,
            extra={**self.extra, **kwargs},
        )
