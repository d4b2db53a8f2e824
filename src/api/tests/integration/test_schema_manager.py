"""Integration tests for SchemaLifecycleManager.

These tests require PostgreSQL to be running. They create real store
schemas, run the store migrations into them and inspect the ledger.
"""

import asyncio
import shutil
from pathlib import Path

import pytest
from sqlalchemy import text

from tenancy.domain.tenant import Tenant
from tenancy.infrastructure import schema_manager as schema_manager_module
from tenancy.infrastructure.schema_manager import SchemaLifecycleManager
from tenancy.ports.exceptions import SchemaOperationError

pytestmark = pytest.mark.integration


async def _tables(engine, schema_name: str) -> set[str]:
    async with engine.connect() as conn:
        result = await conn.execute(
            text(
                "SELECT table_name FROM information_schema.tables "
                "WHERE table_schema = :schema_name"
            ),
            {"schema_name": schema_name},
        )
        return set(result.scalars().all())


FIRST_REVISION = "0a1b2c3d4e5f"
SECOND_REVISION = "1b2c3d4e5f60"

_REVISION_TEMPLATE = '''\
"""{doc}"""

import sqlalchemy as sa
from alembic import op

revision = "{revision}"
down_revision = {down_revision!r}
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table("{table}", sa.Column("id", sa.Integer(), primary_key=True))
{extra}

def downgrade() -> None:
    op.drop_table("{table}")
'''


def _write_revision(
    versions: Path,
    revision: str,
    down_revision: str | None,
    table: str,
    fails: bool = False,
) -> None:
    extra = '    raise RuntimeError("broken revision")\n' if fails else ""
    (versions / f"{revision}_create_{table}.py").write_text(
        _REVISION_TEMPLATE.format(
            doc=f"create {table}",
            revision=revision,
            down_revision=down_revision,
            table=table,
            extra=extra,
        )
    )


@pytest.fixture
def broken_migrations(tmp_path: Path) -> Path:
    """Store migrations whose second revision raises after creating a table."""
    env = Path(schema_manager_module.__file__).parent / "tenant_migrations" / "env.py"
    shutil.copy(env, tmp_path / "env.py")
    versions = tmp_path / "versions"
    versions.mkdir()
    _write_revision(versions, FIRST_REVISION, None, "widgets")
    _write_revision(versions, SECOND_REVISION, FIRST_REVISION, "gadgets", fails=True)
    return tmp_path


class TestCreateSchema:
    @pytest.mark.asyncio
    async def test_applies_every_revision_in_order(
        self, schema_manager, engine, store_schema
    ):
        schema_name = store_schema("acme")

        applied = await schema_manager.create_schema(schema_name)

        assert applied == schema_manager.available_revisions()
        ledger = await schema_manager.applied_migrations(schema_name)
        assert [r.version for r in ledger] == applied
        assert [r.installed_rank for r in ledger] == sorted(
            r.installed_rank for r in ledger
        )
        assert {"customers", "products", "alembic_version"} <= await _tables(
            engine, schema_name
        )

    @pytest.mark.asyncio
    async def test_is_idempotent(self, schema_manager, store_schema):
        schema_name = store_schema("acme")
        await schema_manager.create_schema(schema_name)

        assert await schema_manager.create_schema(schema_name) == []
        ledger = await schema_manager.applied_migrations(schema_name)
        assert len(ledger) == len(schema_manager.available_revisions())

    @pytest.mark.asyncio
    async def test_concurrent_creates_apply_each_revision_once(
        self, schema_manager, store_schema
    ):
        schema_name = store_schema("race")

        first, second = await asyncio.gather(
            schema_manager.create_schema(schema_name),
            schema_manager.create_schema(schema_name),
        )

        assert sorted(first + second) == sorted(schema_manager.available_revisions())
        ledger = await schema_manager.applied_migrations(schema_name)
        assert [r.version for r in ledger] == schema_manager.available_revisions()

    @pytest.mark.asyncio
    async def test_schemas_are_isolated(self, schema_manager, engine, store_schema):
        acme, globex = store_schema("acme"), store_schema("globex")
        await schema_manager.create_schema(acme)
        await schema_manager.create_schema(globex)

        async with engine.begin() as conn:
            await conn.execute(
                text(
                    f'INSERT INTO "{acme}".customers '
                    "(id, email, first_name, last_name, created_at, updated_at) "
                    "VALUES (gen_random_uuid(), 'jane@acme.test', 'Jane', 'Doe', "
                    "now(), now())"
                )
            )

        async with engine.connect() as conn:
            acme_count = await conn.scalar(
                text(f'SELECT count(*) FROM "{acme}".customers')
            )
            globex_count = await conn.scalar(
                text(f'SELECT count(*) FROM "{globex}".customers')
            )

        assert (acme_count, globex_count) == (1, 0)


class TestMigrate:
    @pytest.mark.asyncio
    async def test_missing_schema_is_an_error(self, schema_manager, store_schema):
        with pytest.raises(SchemaOperationError):
            await schema_manager.migrate(store_schema("ghost"))

    @pytest.mark.asyncio
    async def test_up_to_date_schema_applies_nothing(
        self, schema_manager, store_schema
    ):
        schema_name = store_schema("acme")
        await schema_manager.create_schema(schema_name)

        assert await schema_manager.migrate(schema_name) == []

    @pytest.mark.asyncio
    async def test_failed_revision_is_named_and_earlier_ones_stay(
        self, engine, store_schema, broken_migrations
    ):
        schema_name = store_schema("broken")
        manager = SchemaLifecycleManager(
            engine=engine, migrations_location=str(broken_migrations)
        )

        with pytest.raises(SchemaOperationError) as exc_info:
            await manager.create_schema(schema_name)

        assert exc_info.value.version == SECOND_REVISION
        ledger = await manager.applied_migrations(schema_name)
        assert [r.version for r in ledger] == [FIRST_REVISION]
        tables = await _tables(engine, schema_name)
        assert "widgets" in tables
        assert "gadgets" not in tables

    @pytest.mark.asyncio
    async def test_migrate_resumes_from_the_failed_revision(
        self, engine, store_schema, broken_migrations
    ):
        schema_name = store_schema("broken")
        manager = SchemaLifecycleManager(
            engine=engine, migrations_location=str(broken_migrations)
        )
        with pytest.raises(SchemaOperationError):
            await manager.create_schema(schema_name)

        _write_revision(
            broken_migrations / "versions", SECOND_REVISION, FIRST_REVISION, "gadgets"
        )
        fixed = SchemaLifecycleManager(
            engine=engine, migrations_location=str(broken_migrations)
        )

        assert await fixed.migrate(schema_name) == [SECOND_REVISION]
        ledger = await fixed.applied_migrations(schema_name)
        assert [r.version for r in ledger] == [FIRST_REVISION, SECOND_REVISION]
        assert {"widgets", "gadgets"} <= await _tables(engine, schema_name)


class TestDropSchema:
    @pytest.mark.asyncio
    async def test_drops_schema_and_contents(self, schema_manager, store_schema):
        schema_name = store_schema("acme")
        await schema_manager.create_schema(schema_name)

        await schema_manager.drop_schema(schema_name)

        assert await schema_manager.schema_exists(schema_name) is False

    @pytest.mark.asyncio
    async def test_missing_schema_is_not_an_error(
        self, schema_manager, store_schema, registry_scope
    ):
        schema_name = store_schema("ghost")
        async with registry_scope() as registry:
            before = await registry.insert(
                Tenant.register(
                    key="ghost-co",
                    name="Ghost Co",
                    subdomain="ghost",
                    schema_name=schema_name,
                )
            )

        await schema_manager.drop_schema(schema_name)

        async with registry_scope() as registry:
            after = await registry.find_by_key("ghost-co")
        assert after is not None
        assert (after.status, after.version, after.deleted) == (
            before.status,
            before.version,
            before.deleted,
        )

    @pytest.mark.asyncio
    async def test_drop_leaves_registry_row_untouched(
        self, schema_manager, store_schema, registry_scope
    ):
        schema_name = store_schema("acme")
        await schema_manager.create_schema(schema_name)
        async with registry_scope() as registry:
            before = await registry.insert(
                Tenant.register(
                    key="acme-co",
                    name="Acme Co",
                    subdomain="acme",
                    schema_name=schema_name,
                )
            )

        await schema_manager.drop_schema(schema_name)

        async with registry_scope() as registry:
            after = await registry.find_by_key("acme-co")
        assert after is not None
        assert after.schema_name == schema_name
        assert (after.status, after.version, after.deleted) == (
            before.status,
            before.version,
            before.deleted,
        )
