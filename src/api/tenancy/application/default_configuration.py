"""Default configuration applied to every newly provisioned store."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from tenancy.domain.tenant import Tenant
from tenancy.domain.value_objects import BillingPlan

BASIC_PRODUCT_LIMIT = 100
PAID_PRODUCT_LIMIT = 1000


def build_default_settings(
    tenant: Tenant,
    store_domain: str,
    currency: str,
    locale: str,
) -> dict[str, Any]:
    """Settings blob a store starts with, shaped by its billing plan."""
    basic = tenant.billing_plan is BillingPlan.BASIC
    return {
        "currency": currency,
        "locale": locale,
        "theme": {
            "primaryColor": "#3498db",
            "secondaryColor": "#2ecc71",
            "logo": "/assets/default-logo.png",
            "favicon": "/assets/favicon.ico",
        },
        "features": {
            "enableReviews": True,
            "enableWishlist": True,
            "maxProductsAllowed": BASIC_PRODUCT_LIMIT if basic else PAID_PRODUCT_LIMIT,
            "enableMultiCurrency": not basic,
        },
        "email": {
            "senderName": tenant.name,
            "senderEmail": f"noreply@{tenant.subdomain}.{store_domain}",
        },
    }


def merge_settings(
    defaults: dict[str, Any], overrides: dict[str, Any] | None
) -> dict[str, Any]:
    """Deep-merge ``overrides`` onto ``defaults``; overrides win on conflicts."""
    merged = deepcopy(defaults)
    for key, value in (overrides or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_settings(merged[key], value)
        else:
            merged[key] = deepcopy(value)
    return merged
