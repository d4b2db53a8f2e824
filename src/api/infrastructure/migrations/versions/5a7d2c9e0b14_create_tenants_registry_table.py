"""create tenants registry table

Revision ID: 5a7d2c9e0b14
Revises:
Create Date: 2026-09-14 09:40:03.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "5a7d2c9e0b14"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "tenants",
        sa.Column("id", sa.String(length=26), nullable=False),  # ULID
        sa.Column("key", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("subdomain", sa.String(length=63), nullable=False),
        sa.Column("schema_name", sa.String(length=63), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("billing_plan", sa.String(length=20), nullable=False),
        sa.Column(
            "settings",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("identity_client_id", sa.String(length=255), nullable=True),
        sa.Column("admin_user_id", sa.String(length=255), nullable=True),
        sa.Column(
            "version", sa.Integer(), nullable=False, server_default=sa.text("0")
        ),
        sa.Column(
            "deleted", sa.Boolean(), nullable=False, server_default=sa.text("false")
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_tenants"),
    )
    # Unique across soft-deleted rows too: names are never reused
    op.create_index("ix_tenants_key", "tenants", ["key"], unique=True)
    op.create_index("ix_tenants_subdomain", "tenants", ["subdomain"], unique=True)
    op.create_index("ix_tenants_schema_name", "tenants", ["schema_name"], unique=True)
    op.create_index("ix_tenants_status", "tenants", ["status"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_tenants_status", table_name="tenants")
    op.drop_index("ix_tenants_schema_name", table_name="tenants")
    op.drop_index("ix_tenants_subdomain", table_name="tenants")
    op.drop_index("ix_tenants_key", table_name="tenants")
    op.drop_table("tenants")
