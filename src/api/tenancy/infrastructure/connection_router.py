"""Routes database sessions to the schema of the resolved store.

Every transaction a routed session begins starts with
``SET LOCAL search_path TO "<schema>"``. The setting lasts exactly as long
as the transaction, so commits inside a unit of work keep the schema, and
a connection handed back to the pool carries no trace of it.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shared_kernel.middleware.tenant_context import TenantResolutionContext
from tenancy.infrastructure.identifiers import quote_schema
from tenancy.infrastructure.observability import (
    ConnectionRouterProbe,
    DefaultConnectionRouterProbe,
)


def search_path_statement(schema_name: str) -> str:
    """SQL that scopes the current transaction to ``schema_name``.

    Raises:
        InvalidSchemaNameError: If the name is not a safe identifier
    """
    return f"SET LOCAL search_path TO {quote_schema(schema_name)}"


class TenantConnectionRouter:
    """Opens AsyncSessions bound to a store schema.

    The resolution context is passed in explicitly; the router keeps no
    notion of a "current" tenant.
    """

    def __init__(
        self,
        sessionmaker: async_sessionmaker[AsyncSession],
        probe: ConnectionRouterProbe | None = None,
    ) -> None:
        """Initialize the router.

        Args:
            sessionmaker: Factory for sessions on the store-serving engine
            probe: Optional domain probe for observability
        """
        self._sessionmaker = sessionmaker
        self._probe = probe or DefaultConnectionRouterProbe()

    @asynccontextmanager
    async def session(
        self, context: TenantResolutionContext
    ) -> AsyncIterator[AsyncSession]:
        """Yield a session whose every transaction runs in the store schema.

        Args:
            context: Resolution result of the current unit of work

        Raises:
            InvalidSchemaNameError: If the context carries an unsafe schema name
        """
        statement = text(search_path_statement(context.schema_name))

        def _scope_transaction(
            session: Any, transaction: Any, connection: Any
        ) -> None:
            connection.execute(statement)

        async with self._sessionmaker() as session:
            event.listen(session.sync_session, "after_begin", _scope_transaction)
            self._probe.session_routed(context.schema_name, context.tenant_key)
            try:
                yield session
            finally:
                event.remove(session.sync_session, "after_begin", _scope_transaction)
