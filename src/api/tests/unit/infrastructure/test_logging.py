"""Unit tests for logging configuration."""

import logging

import pytest
import structlog
import structlog.testing

from infrastructure.logging import configure_logging


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    structlog.reset_defaults()
    logging.getLogger("alembic").setLevel(logging.NOTSET)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.NOTSET)


def test_level_filters_structlog_events():
    configure_logging("WARNING")

    with structlog.testing.capture_logs() as logs:
        logger = structlog.get_logger()
        logger.info("store_schema_created")
        logger.warning("orphaned_store_schema")

    assert [entry["event"] for entry in logs] == ["orphaned_store_schema"]


def test_alembic_follows_the_configured_level():
    configure_logging("debug")

    assert logging.getLogger("alembic").level == logging.DEBUG


def test_sql_echo_stays_at_warning_or_above():
    configure_logging("DEBUG")
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

    configure_logging("ERROR")
    assert logging.getLogger("sqlalchemy.engine").level == logging.ERROR
