"""Maps request signals to a store schema.

Resolution walks an ordered chain of strategies chosen once at startup.
The first strategy whose signal names a live store wins; when none does,
the configured default store is used without touching the database.

Resolution never raises for missing, unknown or unreadable signals. A
registry failure is observed as a ResolutionDegraded value and the chain
moves on. Cancellation is not an error and is never swallowed.
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from typing import Protocol, Sequence

from shared_kernel.middleware.observability.tenant_context_probe import (
    DefaultTenantResolutionProbe,
    TenantResolutionProbe,
)
from shared_kernel.middleware.tenant_context import (
    ResolutionDegraded,
    ResolutionSource,
    TenantResolutionContext,
)
from tenancy.domain.schema_name import validate_schema_name
from tenancy.domain.tenant import Tenant
from tenancy.ports.repositories import ITenantRegistry, RegistryScope


@dataclass(frozen=True)
class TenantSignals:
    """Raw inputs a request offers for resolution.

    Attributes:
        tenant_key: Value of the explicit tenant header, if sent.
        host: Value of the Host header, if sent.
    """

    tenant_key: str | None = None
    host: str | None = None


def subdomain_from_host(host: str | None, reserved: Sequence[str] = ()) -> str | None:
    """Extract the store label from a Host header value.

    The port and any trailing dot are dropped and the name is lower-cased.
    The first label is returned when the name has at least two labels, is
    not an IP address, and the label is not reserved.
    """
    if not host:
        return None
    hostname = host.strip().lower()
    if not hostname or hostname.startswith("["):
        return None
    hostname = hostname.split(":", 1)[0].rstrip(".")

    try:
        ipaddress.ip_address(hostname)
        return None
    except ValueError:
        pass

    labels = hostname.split(".")
    if len(labels) < 2 or not labels[0]:
        return None
    label = labels[0]
    if label in reserved:
        return None
    return label


class ResolutionStrategy(Protocol):
    """One precedence level of tenant resolution."""

    name: ResolutionSource

    def signal(self, signals: TenantSignals) -> str | None:
        """The value this strategy looks up, or None when the request has none."""
        ...

    async def lookup(self, registry: ITenantRegistry, signal: str) -> Tenant | None:
        """Find the store the signal names."""
        ...


class HeaderKeyStrategy:
    """Resolve from an explicit tenant key header."""

    name = ResolutionSource.HEADER

    def signal(self, signals: TenantSignals) -> str | None:
        key = (signals.tenant_key or "").strip().lower()
        return key or None

    async def lookup(self, registry: ITenantRegistry, signal: str) -> Tenant | None:
        return await registry.find_by_key(signal)


class SubdomainStrategy:
    """Resolve from the first label of the Host header."""

    name = ResolutionSource.SUBDOMAIN

    def __init__(self, reserved_labels: Sequence[str] = ("www",)) -> None:
        self._reserved = tuple(label.lower() for label in reserved_labels)

    def signal(self, signals: TenantSignals) -> str | None:
        return subdomain_from_host(signals.host, self._reserved)

    async def lookup(self, registry: ITenantRegistry, signal: str) -> Tenant | None:
        return await registry.find_by_subdomain(signal)


def build_strategies(
    names: Sequence[str],
    reserved_subdomains: Sequence[str] = ("www",),
) -> tuple[ResolutionStrategy, ...]:
    """Build the strategy chain from configuration, in the given order.

    Raises:
        ValueError: On an unknown strategy name
    """
    strategies: list[ResolutionStrategy] = []
    for name in names:
        if name == ResolutionSource.HEADER:
            strategies.append(HeaderKeyStrategy())
        elif name == ResolutionSource.SUBDOMAIN:
            strategies.append(SubdomainStrategy(reserved_subdomains))
        else:
            raise ValueError(f"Unknown tenant resolution strategy: {name!r}")
    return tuple(strategies)


class TenantResolver:
    """Resolves request signals to a TenantResolutionContext."""

    def __init__(
        self,
        registry_scope: RegistryScope,
        strategies: Sequence[ResolutionStrategy],
        default_tenant_key: str,
        default_schema_name: str,
        probe: TenantResolutionProbe | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            registry_scope: Opens a registry for one lookup; each lookup gets
                its own, so a failed one cannot affect the next
            strategies: Precedence chain, highest first
            default_tenant_key: Key reported when falling back
            default_schema_name: Schema used when falling back
            probe: Optional domain probe for observability
        """
        self._registry_scope = registry_scope
        self._strategies = tuple(strategies)
        self._default = TenantResolutionContext(
            schema_name=validate_schema_name(default_schema_name),
            tenant_key=default_tenant_key,
            source=ResolutionSource.DEFAULT,
        )
        self._probe = probe or DefaultTenantResolutionProbe()

    @property
    def strategy_names(self) -> list[str]:
        return [strategy.name.value for strategy in self._strategies]

    async def resolve(self, signals: TenantSignals) -> TenantResolutionContext:
        """Resolve the store for one request.

        Returns:
            The context of the first matching strategy, else the default
        """
        for strategy in self._strategies:
            signal = strategy.signal(signals)
            if signal is None:
                continue

            try:
                async with self._registry_scope() as registry:
                    tenant = await strategy.lookup(registry, signal)
            except Exception as e:
                self._probe.resolution_degraded(
                    ResolutionDegraded.from_exception(strategy.name.value, signal, e)
                )
                continue

            if tenant is None:
                self._probe.tenant_signal_unmatched(strategy.name.value, signal)
                continue

            context = TenantResolutionContext(
                schema_name=tenant.schema_name,
                tenant_key=tenant.key,
                source=strategy.name,
            )
            self._probe.tenant_resolved(context)
            return context

        self._probe.tenant_resolved(self._default)
        return self._default
