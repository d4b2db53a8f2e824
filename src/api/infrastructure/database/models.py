"""SQLAlchemy declarative base and the column mixins shared by registry tables.

Only registry tables are mapped here. Store schema tables are owned by the
store migrations and are never declared as ORM models.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Boolean, DateTime, Integer, MetaData, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Index and constraint names are matched when translating unique
# violations, so they must be stable across autogenerated revisions.
NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for registry ORM models.

    Tables carry no schema qualifier. They resolve through the connection's
    search_path, which the engines pin to the registry schema.
    """

    metadata = MetaData(naming_convention=NAMING_CONVENTION)

    type_annotation_map: dict[Any, Any] = {
        dict[str, Any]: JSONB,
    }


class TimestampMixin:
    """created_at / updated_at columns, timezone-aware and set in Python."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=_utc_now,
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=_utc_now,
        onupdate=_utc_now,
        nullable=False,
    )


class VersionedMixin:
    """Optimistic-concurrency counter.

    Writers compare against the version they read and bump it by one in the
    same conditional UPDATE. New rows start at 0.
    """

    version: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )


class SoftDeleteMixin:
    """Tombstone flag. Deleted rows stay in the table and keep their names."""

    deleted: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
    )
