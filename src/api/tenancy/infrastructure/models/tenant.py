"""SQLAlchemy ORM model for the tenants table.

The tenants table is the store registry. It lives in the registry schema
and is the only table the request path reads outside a store schema.
"""

from typing import Any

from sqlalchemy import Index, String, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import (
    Base,
    SoftDeleteMixin,
    TimestampMixin,
    VersionedMixin,
)


class TenantModel(Base, TimestampMixin, VersionedMixin, SoftDeleteMixin):
    """ORM model for the tenants table.

    Note: key, subdomain and schema_name are unique across every row,
    soft-deleted ones included, so a name is never handed out twice.
    """

    __tablename__ = "tenants"
    __table_args__ = (
        Index("ix_tenants_key", "key", unique=True),
        Index("ix_tenants_subdomain", "subdomain", unique=True),
        Index("ix_tenants_schema_name", "schema_name", unique=True),
        Index("ix_tenants_status", "status"),
    )

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    key: Mapped[str] = mapped_column(String(50), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    subdomain: Mapped[str] = mapped_column(String(63), nullable=False)
    schema_name: Mapped[str] = mapped_column(String(63), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    billing_plan: Mapped[str] = mapped_column(String(20), nullable=False)
    settings: Mapped[dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        default=dict,
        server_default=text("'{}'::jsonb"),
    )
    identity_client_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    admin_user_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<TenantModel(key={self.key}, schema_name={self.schema_name}, "
            f"status={self.status}, version={self.version})>"
        )
