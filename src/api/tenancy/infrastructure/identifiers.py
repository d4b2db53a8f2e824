"""Safe quoting of store schema identifiers into SQL."""

from __future__ import annotations

from sqlalchemy.dialects import postgresql

from tenancy.domain.schema_name import validate_schema_name

_preparer = postgresql.dialect().identifier_preparer


def quote_schema(schema_name: str) -> str:
    """Validate a schema name and return it as a quoted identifier.

    Raises:
        InvalidSchemaNameError: If the name is not a safe identifier
    """
    return _preparer.quote_identifier(validate_schema_name(schema_name))
