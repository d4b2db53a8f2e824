"""HTTP routes for store onboarding and administration."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from tenancy.application.exceptions import ProvisioningError
from tenancy.application.services import (
    StoreProvisioningService,
    TenantAdministrationService,
)
from tenancy.dependencies.services import (
    get_store_provisioning_service,
    get_tenant_administration_service,
)
from tenancy.domain.exceptions import TenantValidationError
from tenancy.domain.value_objects import ProvisioningStage
from tenancy.ports.exceptions import (
    ConcurrentModificationError,
    DuplicateTenantError,
    SchemaOperationError,
    TenantNotFoundError,
)
from tenancy.presentation.stores.models import (
    ChangeStatusRequest,
    CreateStoreRequest,
    StoreResponse,
)

router = APIRouter(
    prefix="/stores",
    tags=["stores"],
)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
)
async def create_store(
    request: CreateStoreRequest,
    service: Annotated[
        StoreProvisioningService, Depends(get_store_provisioning_service)
    ],
) -> StoreResponse:
    """Onboard a new store.

    Args:
        request: Store and administrator details
        service: Store provisioning service

    Returns:
        StoreResponse for the ACTIVE store

    Raises:
        HTTPException: 422 if the request is invalid or uses a reserved name
        HTTPException: 409 if the key or subdomain is taken
        HTTPException: 502 if the identity provider failed
        HTTPException: 500 if any other provisioning step failed
    """
    try:
        tenant = await service.provision_store(request.to_provisioning_request())
        return StoreResponse.from_domain(tenant)

    except TenantValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        ) from e
    except DuplicateTenantError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        ) from e
    except ProvisioningError as e:
        code = (
            status.HTTP_502_BAD_GATEWAY
            if e.stage is ProvisioningStage.IDENTITY_PROVISIONING
            else status.HTTP_500_INTERNAL_SERVER_ERROR
        )
        raise HTTPException(status_code=code, detail=str(e)) from e


@router.get("")
async def list_stores(
    service: Annotated[
        TenantAdministrationService, Depends(get_tenant_administration_service)
    ],
    include_deleted: bool = False,
) -> list[StoreResponse]:
    """List registered stores."""
    tenants = await service.list_stores(include_deleted=include_deleted)
    return [StoreResponse.from_domain(tenant) for tenant in tenants]


@router.get("/{key}")
async def get_store(
    key: str,
    service: Annotated[
        TenantAdministrationService, Depends(get_tenant_administration_service)
    ],
) -> StoreResponse:
    """Get a live store by key.

    Raises:
        HTTPException: 404 if no live store has this key
    """
    try:
        tenant = await service.get_store(key)
        return StoreResponse.from_domain(tenant)
    except TenantNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        ) from e


@router.patch("/{key}/status")
async def change_store_status(
    key: str,
    request: ChangeStatusRequest,
    service: Annotated[
        TenantAdministrationService, Depends(get_tenant_administration_service)
    ],
) -> StoreResponse:
    """Change a store's lifecycle status.

    Raises:
        HTTPException: 422 if the transition is not allowed
        HTTPException: 404 if no live store has this key
        HTTPException: 409 if the version is stale
    """
    try:
        tenant = await service.change_status(key, request.status, request.version)
        return StoreResponse.from_domain(tenant)
    except TenantValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        ) from e
    except TenantNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        ) from e
    except ConcurrentModificationError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        ) from e


@router.delete("/{key}")
async def decommission_store(
    key: str,
    service: Annotated[
        TenantAdministrationService, Depends(get_tenant_administration_service)
    ],
    version: Annotated[int, Query(ge=0)],
    drop_schema: bool = False,
) -> StoreResponse:
    """Soft-delete a store, optionally dropping its schema.

    Raises:
        HTTPException: 422 if the store is the default store
        HTTPException: 404 if no live store has this key
        HTTPException: 409 if the version is stale
        HTTPException: 500 if the schema drop failed
    """
    try:
        tenant = await service.decommission(key, version, drop_schema=drop_schema)
        return StoreResponse.from_domain(tenant)
    except TenantValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        ) from e
    except TenantNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        ) from e
    except ConcurrentModificationError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        ) from e
    except SchemaOperationError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        ) from e
