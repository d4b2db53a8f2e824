"""HTTP route exposing the store a request resolves to."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from shared_kernel.middleware.tenant_context import (
    ResolutionSource,
    TenantResolutionContext,
)
from tenancy.dependencies.resolution import (
    get_tenant_resolution_context,
    get_tenant_session,
)

router = APIRouter(
    prefix="/tenant",
    tags=["tenant"],
)


class TenantContextResponse(BaseModel):
    """Resolution result plus the schema the routed session actually uses."""

    tenant_key: str
    schema_name: str
    source: ResolutionSource
    current_schema: str | None


@router.get("/context")
async def get_tenant_context(
    context: Annotated[
        TenantResolutionContext, Depends(get_tenant_resolution_context)
    ],
    session: Annotated[AsyncSession, Depends(get_tenant_session)],
) -> TenantContextResponse:
    """Show which store the request resolved to.

    ``current_schema`` is read through the routed session, so it confirms
    that queries run in the resolved schema.
    """
    async with session.begin():
        current_schema = await session.scalar(text("SELECT current_schema()"))

    return TenantContextResponse(
        tenant_key=context.tenant_key,
        schema_name=context.schema_name,
        source=context.source,
        current_schema=current_schema,
    )
