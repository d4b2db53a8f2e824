"""Store schema naming rules.

A store's schema name is derived from its key exactly once, at
provisioning, and persisted in the registry. It is never recomputed.
"""

from __future__ import annotations

import re

from tenancy.domain.exceptions import InvalidSchemaNameError, TenantValidationError

DEFAULT_SCHEMA_PREFIX = "store_"

# Unquoted-safe PostgreSQL identifier, at most 63 bytes (NAMEDATALEN - 1).
SAFE_SCHEMA_NAME = re.compile(r"^[a-z_][a-z0-9_]{0,62}$")

_NON_ALPHANUMERIC_RUN = re.compile(r"[^a-z0-9]+")


def derive_schema_name(tenant_key: str, prefix: str = DEFAULT_SCHEMA_PREFIX) -> str:
    """Derive the schema name for a store key.

    The key is lower-cased and every run of non-alphanumeric characters
    collapses to a single underscore, so ``acme-co`` becomes
    ``store_acme_co``. Applying the rule to the key portion of its own
    output returns the same name.

    Args:
        tenant_key: Store key
        prefix: Schema name prefix

    Returns:
        A validated schema name

    Raises:
        TenantValidationError: If the key has no alphanumeric characters
        InvalidSchemaNameError: If the result is not a safe identifier
    """
    slug = _NON_ALPHANUMERIC_RUN.sub("_", tenant_key.strip().lower()).strip("_")
    if not slug:
        raise TenantValidationError(
            f"Cannot derive a schema name from key '{tenant_key}'", field="key"
        )
    return validate_schema_name(f"{prefix}{slug}")


def validate_schema_name(schema_name: str) -> str:
    """Return ``schema_name`` unchanged if it is a safe identifier.

    Raises:
        InvalidSchemaNameError: If it is not
    """
    if not isinstance(schema_name, str) or not SAFE_SCHEMA_NAME.match(schema_name):
        raise InvalidSchemaNameError(str(schema_name))
    return schema_name
