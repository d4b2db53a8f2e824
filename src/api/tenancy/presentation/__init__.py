"""Tenancy presentation layer.

Store administration lives under ``/stores``; the per-request resolution
result is exposed under ``/tenant``.
"""

from __future__ import annotations

from fastapi import APIRouter

from tenancy.presentation import stores, tenant

router = APIRouter()

router.include_router(stores.router)
router.include_router(tenant.router)

__all__ = ["router"]
